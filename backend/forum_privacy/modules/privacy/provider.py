"""
Forum privacy provider - entry point used by the privacy request framework.
"""

from collections.abc import Collection

from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.modules.files.service import FileStorageService
from forum_privacy.modules.privacy.collaborators import (
    CacheInvalidator,
    ExportWriter,
    FileStorage,
    NullPlagiarismProvider,
    PlagiarismProvider,
    RatingProvider,
    TagProvider,
)
from forum_privacy.modules.privacy.eraser import DataEraser
from forum_privacy.modules.privacy.exporter import DataExporter
from forum_privacy.modules.privacy.locator import DataLocator
from forum_privacy.modules.privacy.preferences import export_user_preferences
from forum_privacy.modules.privacy.userlist import UserList
from forum_privacy.modules.rating.service import RatingService
from forum_privacy.modules.tagging.service import TagService


class ForumPrivacyProvider:
    """
    Locates, exports and erases forum user data.

    Every call works inside the given session and never commits; the caller
    owns the transaction and rolls it back if a call raises.

    Usage:
        async with get_session() as db:
            provider = ForumPrivacyProvider(db, writer)
            container_ids = await provider.find_containers_for_user(user_id)
            await provider.export(user_id, container_ids)
    """

    def __init__(
        self,
        db: AsyncSession,
        writer: ExportWriter | None = None,
        ratings: RatingProvider | None = None,
        tags: TagProvider | None = None,
        files: FileStorage | None = None,
        plagiarism: PlagiarismProvider | None = None,
        cache: CacheInvalidator | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            db: Database session
            writer: Export destination, required for exports only
            ratings: Rating provider (database ratings by default)
            tags: Tag provider (database tags by default)
            files: File storage (database files by default)
            plagiarism: Plagiarism provider (none by default)
            cache: Notified with forum ids after erasures
        """
        self.db = db
        self.writer = writer
        self.ratings = ratings or RatingService(db)
        self.tags = tags or TagService(db)
        self.files = files or FileStorageService(db)
        self.plagiarism = plagiarism or NullPlagiarismProvider()

        self.locator = DataLocator(db, self.ratings)
        self.eraser = DataEraser(db, self.ratings, self.tags, self.files, cache=cache)

    # ==================== Locating ====================

    async def find_containers_for_user(self, user_id: int) -> set[int]:
        return await self.locator.find_containers_for_user(user_id)

    async def find_users_in_container(self, container_id: int) -> list[int]:
        return await self.locator.find_users_in_container(container_id)

    async def get_users_in_container(self, container_id: int) -> UserList:
        return await self.locator.get_users_in_container(container_id)

    # ==================== Export ====================

    def _exporter(self) -> DataExporter:
        if self.writer is None:
            raise ValueError("An export writer is required to export data")
        return DataExporter(self.db, self.writer, self.ratings, self.tags, self.plagiarism)

    async def export(self, user_id: int, container_ids: Collection[int]) -> None:
        """Export the user's data in the approved containers."""
        if not container_ids:
            return
        await self._exporter().export(user_id, container_ids)

    async def export_user_preferences(self, user_id: int) -> None:
        """Export the user's site-wide forum preferences."""
        if self.writer is None:
            raise ValueError("An export writer is required to export data")
        await export_user_preferences(self.db, self.writer, user_id)

    # ==================== Erasure ====================

    async def purge_container(self, container_id: int) -> None:
        await self.eraser.purge_container(container_id)

    async def purge_user_data(self, user_id: int, container_ids: Collection[int]) -> None:
        await self.eraser.purge_user_data(user_id, container_ids)

    async def purge_users_in_container(
        self, container_id: int, user_ids: Collection[int]
    ) -> None:
        await self.eraser.purge_users_in_container(container_id, user_ids)
