"""
Locating forum data: which forums hold data about a user, and which users
have data in a forum.
"""

from loguru import logger
from sqlalchemy import select, union
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.forum import Container, ContainerKind, Discussion, Post
from forum_privacy.modules.privacy.categories import (
    COMPONENT,
    RATING_AREA,
    locatable_categories,
    select_forum_post_ids,
)
from forum_privacy.modules.privacy.collaborators import RatingProvider
from forum_privacy.modules.privacy.containers import resolve_forum
from forum_privacy.modules.privacy.userlist import UserList


class DataLocator:
    """
    Finds where forum data about users is stored.

    Usage:
        locator = DataLocator(db_session, ratings=RatingService(db_session))
        container_ids = await locator.find_containers_for_user(user_id)
        users = await locator.get_users_in_container(container_id)
    """

    def __init__(self, db: AsyncSession, ratings: RatingProvider) -> None:
        """Initialize locator with database session and rating provider."""
        self.db = db
        self.ratings = ratings

    # ==================== By user ====================

    async def find_containers_for_user(self, user_id: int) -> set[int]:
        """
        Find every forum container holding data about the user.

        A container is included when at least one data category, or a rating
        given by the user on a post, references the user in its forum.

        Args:
            user_id: User to search for

        Returns:
            Container ids, empty when the user has no forum data
        """
        forum_queries = [
            category.select_forum_ids(user_id) for category in locatable_categories()
        ]
        forum_queries.append(
            select(Discussion.forum_id)
            .join(Post, Post.discussion_id == Discussion.id)
            .where(
                Post.id.in_(
                    self.ratings.select_rated_item_ids(COMPONENT, RATING_AREA, user_id)
                )
            )
        )
        forum_ids = union(*forum_queries).subquery()

        query = select(Container.id).where(
            Container.kind == ContainerKind.FORUM,
            Container.instance_id.in_(select(forum_ids.c[0])),
        )
        result = await self.db.execute(query)
        container_ids = set(result.scalars().all())

        logger.debug(f"User {user_id} has forum data in {len(container_ids)} containers")
        return container_ids

    # ==================== By container ====================

    async def get_users_in_container(self, container_id: int) -> UserList:
        """
        Collect users with data in a forum container.

        Each category adds its own users, so a user appears once per
        category referencing them. Containers that do not anchor a forum
        yield an empty list.
        """
        users = UserList(container_id)

        resolved = await resolve_forum(self.db, container_id)
        if resolved is None:
            logger.debug(f"Container {container_id} is not a forum, no users to report")
            return users
        _, forum = resolved

        for category in locatable_categories():
            await users.add_from_query(self.db, category.select_user_ids(forum.id))

        await self.ratings.add_users_for_items(
            users, COMPONENT, RATING_AREA, select_forum_post_ids([forum.id])
        )

        logger.debug(
            f"Found {len(users.user_ids)} users ({len(users)} entries) "
            f"in container {container_id}"
        )
        return users

    async def find_users_in_container(self, container_id: int) -> list[int]:
        """User ids with data in the container, one entry per referencing category."""
        users = await self.get_users_in_container(container_id)
        return list(users.entries)
