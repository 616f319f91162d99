"""
File Storage Service - files kept in per-item areas.
"""

from loguru import logger
from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.files import StoredFile


class FileStorageService:
    """
    Service for listing and deleting files in component file areas.

    Usage:
        files = FileStorageService(db_session)
        attachments = await files.get_area_files(container_id, "forum", "attachment", post_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize file storage service with database session."""
        self.db = db

    async def get_area_files(
        self,
        container_id: int,
        component: str,
        file_area: str,
        item_id: int | None = None,
    ) -> list[StoredFile]:
        """
        Get files in an area.

        Args:
            container_id: Container owning the files
            component: Owning component
            file_area: File area name
            item_id: Restrict to one item (all items when None)

        Returns:
            Files ordered by path and name
        """
        query = select(StoredFile).where(
            StoredFile.container_id == container_id,
            StoredFile.component == component,
            StoredFile.file_area == file_area,
        )
        if item_id is not None:
            query = query.where(StoredFile.item_id == item_id)

        query = query.order_by(StoredFile.file_path, StoredFile.file_name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def delete_area_files(
        self,
        container_id: int,
        component: str,
        file_area: str,
        item_ids: Select | list[int] | None = None,
    ) -> int:
        """
        Delete files in an area.

        Args:
            container_id: Container owning the files
            component: Owning component
            file_area: File area name
            item_ids: Restrict to these items (whole area when None)

        Returns:
            Number of deleted files
        """
        statement = delete(StoredFile).where(
            StoredFile.container_id == container_id,
            StoredFile.component == component,
            StoredFile.file_area == file_area,
        )
        if item_ids is not None:
            statement = statement.where(StoredFile.item_id.in_(item_ids))

        result = await self.db.execute(statement.execution_options(synchronize_session=False))
        logger.debug(
            f"Deleted {result.rowcount} files from {component}/{file_area} "
            f"in container {container_id}"
        )
        return result.rowcount
