"""
Rating Service - rating storage queries used by other components.
"""

from typing import TYPE_CHECKING, Any

from loguru import logger
from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.core.transform import format_datetime, yesno
from forum_privacy.models.rating import Rating

if TYPE_CHECKING:
    from forum_privacy.modules.privacy.collaborators import ExportWriter
    from forum_privacy.modules.privacy.userlist import UserList


class RatingService:
    """
    Service exposing ratings to the components whose items are rated.

    Usage:
        ratings = RatingService(db_session)
        rated = ratings.select_rated_item_ids("forum", "post", user_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize rating service with database session."""
        self.db = db

    # ==================== Lookup ====================

    def select_rated_item_ids(
        self,
        component: str,
        rating_area: str,
        user_id: int,
    ) -> Select:
        """
        Build a subquery of item ids the user has rated.

        Callers embed it in their own queries, e.g.
        ``Post.id.in_(ratings.select_rated_item_ids(...))``.
        """
        return select(Rating.item_id).where(
            Rating.component == component,
            Rating.rating_area == rating_area,
            Rating.user_id == user_id,
        )

    async def add_users_for_items(
        self,
        users: "UserList",
        component: str,
        rating_area: str,
        item_ids: Select,
    ) -> None:
        """
        Add every user who rated one of the items to the accumulator.

        Args:
            users: Accumulator to add user ids to
            component: Owning component of the rated items
            rating_area: Rating area within the component
            item_ids: Subquery of candidate item ids
        """
        query = (
            select(Rating.user_id)
            .distinct()
            .where(
                Rating.component == component,
                Rating.rating_area == rating_area,
                Rating.item_id.in_(item_ids),
            )
        )
        result = await self.db.execute(query)
        users.add_users(result.scalars().all())

    async def get_ratings(
        self,
        component: str,
        rating_area: str,
        item_id: int,
        user_id: int | None = None,
    ) -> list[Rating]:
        """Get ratings on one item, optionally only those given by one user."""
        query = select(Rating).where(
            Rating.component == component,
            Rating.rating_area == rating_area,
            Rating.item_id == item_id,
        )
        if user_id is not None:
            query = query.where(Rating.user_id == user_id)
        result = await self.db.execute(query.order_by(Rating.id))
        return list(result.scalars().all())

    # ==================== Export ====================

    async def export_ratings(
        self,
        writer: "ExportWriter",
        user_id: int,
        container_id: int,
        path: list[str],
        component: str,
        rating_area: str,
        item_id: int,
        include_all: bool,
    ) -> bool:
        """
        Export ratings on an item.

        Args:
            writer: Export writer
            user_id: User being exported
            container_id: Container the item belongs to
            path: Path of the item document
            component: Owning component
            rating_area: Rating area
            item_id: Rated item
            include_all: Export ratings by everyone (the item is the user's
                own content), otherwise only ratings given by the user

        Returns:
            True if any rating was written
        """
        ratings = await self.get_ratings(
            component,
            rating_area,
            item_id,
            user_id=None if include_all else user_id,
        )
        if not ratings:
            return False

        data: list[dict[str, Any]] = [
            {
                "rating": rating.value,
                "author": rating.user_id,
                "author_was_you": yesno(rating.user_id == user_id),
                "created": format_datetime(rating.created_at),
            }
            for rating in ratings
        ]
        name = "ratings" if include_all else "your_ratings"
        await writer.export_related_data(container_id, path, name, data)
        return True

    # ==================== Deletion ====================

    async def delete_ratings(
        self,
        container_id: int,
        component: str,
        rating_area: str,
        item_ids: Select | list[int] | None = None,
        user_ids: Select | list[int] | None = None,
    ) -> int:
        """
        Delete ratings in a container.

        Args:
            container_id: Container the ratings were given in
            component: Owning component
            rating_area: Rating area
            item_ids: Restrict to these items (all items when None)
            user_ids: Restrict to ratings given by these users

        Returns:
            Number of deleted ratings
        """
        statement = delete(Rating).where(
            Rating.container_id == container_id,
            Rating.component == component,
            Rating.rating_area == rating_area,
        )
        if item_ids is not None:
            statement = statement.where(Rating.item_id.in_(item_ids))
        if user_ids is not None:
            statement = statement.where(Rating.user_id.in_(user_ids))

        result = await self.db.execute(statement.execution_options(synchronize_session=False))
        logger.debug(
            f"Deleted {result.rowcount} ratings in container {container_id} "
            f"({component}/{rating_area})"
        )
        return result.rowcount
