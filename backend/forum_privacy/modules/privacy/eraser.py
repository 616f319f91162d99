"""
Erasure of forum user data.

Preference, subscription, tracking, read and queue rows are deleted.
Posts are redacted in place instead: other users' replies hang off them, so
the row, its id and its parent link stay and only the content goes.
"""

from collections.abc import Collection

from loguru import logger
from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.forum import Container, Discussion, Forum, MessageFormat, Post
from forum_privacy.modules.privacy.categories import (
    ATTACHMENT_FILE_AREA,
    COMPONENT,
    POST_AUTHORS,
    POST_FILE_AREA,
    RATING_AREA,
    TAG_ITEM_TYPE,
    Erasure,
    categories_with,
    select_authored_post_ids,
)
from forum_privacy.modules.privacy.collaborators import (
    CacheInvalidator,
    FileStorage,
    RatingProvider,
    TagProvider,
)
from forum_privacy.modules.privacy.containers import resolve_forum, resolve_forums


class DataEraser:
    """
    Removes forum data for whole containers or for selected users.

    Usage:
        eraser = DataEraser(db_session, ratings, tags, files)
        await eraser.purge_user_data(user_id, approved_container_ids)
    """

    def __init__(
        self,
        db: AsyncSession,
        ratings: RatingProvider,
        tags: TagProvider,
        files: FileStorage,
        cache: CacheInvalidator | None = None,
    ) -> None:
        """Initialize eraser with database session and collaborators."""
        self.db = db
        self.ratings = ratings
        self.tags = tags
        self.files = files
        self.cache = cache

    # ==================== Whole container ====================

    async def purge_container(self, container_id: int) -> None:
        """
        Delete all forum data in a container, for every user.

        Used when the forum itself is being removed, so posts and discussions
        are deleted outright. Containers that do not anchor a forum are left
        untouched.
        """
        resolved = await resolve_forum(self.db, container_id)
        if resolved is None:
            logger.warning(f"Container {container_id} is not a forum, nothing to purge")
            return
        container, forum = resolved

        logger.info(f"Purging all forum data in container {container.id} (forum {forum.id})")

        for category in categories_with(Erasure.DELETE):
            result = await self.db.execute(category.delete_rows([forum.id]))
            logger.debug(f"Deleted {result.rowcount} {category.name} rows of forum {forum.id}")

        await self.files.delete_area_files(container.id, COMPONENT, POST_FILE_AREA)
        await self.files.delete_area_files(container.id, COMPONENT, ATTACHMENT_FILE_AREA)
        await self.ratings.delete_ratings(container.id, COMPONENT, RATING_AREA)
        await self.tags.delete_item_tags(container.id, COMPONENT, TAG_ITEM_TYPE)

        posts = await self.db.execute(
            delete(Post)
            .where(POST_AUTHORS.in_forums([forum.id]))
            .execution_options(synchronize_session=False)
        )
        discussions = await self.db.execute(
            delete(Discussion)
            .where(Discussion.forum_id == forum.id)
            .execution_options(synchronize_session=False)
        )
        logger.info(
            f"Deleted {posts.rowcount} posts and {discussions.rowcount} discussions "
            f"of forum {forum.id}"
        )

        await self._invalidate({forum.id})

    # ==================== Selected users ====================

    async def purge_user_data(self, user_id: int, container_ids: Collection[int]) -> None:
        """
        Erase one user's data in each approved container.

        Args:
            user_id: User whose data is erased
            container_ids: Approved container ids
        """
        if not container_ids:
            logger.debug(f"No approved containers for user {user_id}, nothing to erase")
            return

        resolved = await resolve_forums(self.db, container_ids)
        skipped = set(container_ids) - {container.id for container, _ in resolved}
        if skipped:
            logger.warning(f"Skipping containers that are not forums: {sorted(skipped)}")

        logger.info(f"Erasing forum data of user {user_id} in {len(resolved)} containers")
        for container, forum in resolved:
            await self._purge_users(container, forum, [user_id])

        await self._invalidate({forum.id for _, forum in resolved})

    async def purge_users_in_container(
        self, container_id: int, user_ids: Collection[int]
    ) -> None:
        """
        Erase the data of several users in one container.

        Args:
            container_id: Approved container
            user_ids: Approved user ids
        """
        if not user_ids:
            logger.debug(f"No approved users for container {container_id}, nothing to erase")
            return

        resolved = await resolve_forum(self.db, container_id)
        if resolved is None:
            logger.warning(f"Container {container_id} is not a forum, nothing to erase")
            return
        container, forum = resolved

        logger.info(f"Erasing forum data of {len(user_ids)} users in container {container.id}")
        await self._purge_users(container, forum, list(user_ids))

        await self._invalidate({forum.id})

    async def _purge_users(
        self, container: Container, forum: Forum, user_ids: list[int]
    ) -> None:
        """Delete the users' own rows and redact their posts in one forum."""
        for category in categories_with(Erasure.DELETE):
            result = await self.db.execute(category.delete_rows([forum.id], user_ids))
            logger.debug(f"Deleted {result.rowcount} {category.name} rows of forum {forum.id}")

        redacted = await self.redact_posts(forum.id, user_ids)

        post_ids = select_authored_post_ids([forum.id], user_ids)

        # Ratings given by other users feed aggregates and are kept
        await self.ratings.delete_ratings(
            container.id, COMPONENT, RATING_AREA, item_ids=post_ids, user_ids=user_ids
        )
        await self.tags.delete_item_tags(
            container.id, COMPONENT, TAG_ITEM_TYPE, item_ids=post_ids
        )
        await self.files.delete_area_files(
            container.id, COMPONENT, POST_FILE_AREA, item_ids=post_ids
        )
        await self.files.delete_area_files(
            container.id, COMPONENT, ATTACHMENT_FILE_AREA, item_ids=post_ids
        )

        logger.debug(f"Redacted {redacted} posts in forum {forum.id}")

    async def redact_posts(self, forum_id: int, user_ids: list[int]) -> int:
        """
        Clear the content of the users' posts in a forum and mark them deleted.

        Returns:
            Number of redacted posts
        """
        result = await self.db.execute(
            update(Post)
            .where(POST_AUTHORS.in_forums([forum_id]), Post.author_id.in_(user_ids))
            .values(
                subject="",
                message="",
                message_format=MessageFormat.PLAIN,
                deleted=True,
                modified_at=Post.modified_at,
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def _invalidate(self, forum_ids: set[int]) -> None:
        if self.cache is not None and forum_ids:
            await self.cache.invalidate(forum_ids)
