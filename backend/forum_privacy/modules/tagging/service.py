"""
Tag Service - tag instances attached to items of other components.
"""

from typing import TYPE_CHECKING

from loguru import logger
from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.tagging import Tag, TagInstance

if TYPE_CHECKING:
    from forum_privacy.modules.privacy.collaborators import ExportWriter


class TagService:
    """
    Service for reading and removing tags applied to items.

    Usage:
        tags = TagService(db_session)
        names = await tags.get_item_tags("forum", "forum_posts", post_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize tag service with database session."""
        self.db = db

    async def get_item_tags(
        self,
        component: str,
        item_type: str,
        item_id: int,
    ) -> list[str]:
        """Get tag names applied to an item, in display order."""
        query = (
            select(Tag.raw_name)
            .join(TagInstance, TagInstance.tag_id == Tag.id)
            .where(
                TagInstance.component == component,
                TagInstance.item_type == item_type,
                TagInstance.item_id == item_id,
            )
            .order_by(TagInstance.ordering, TagInstance.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def export_item_tags(
        self,
        writer: "ExportWriter",
        user_id: int,
        container_id: int,
        path: list[str],
        component: str,
        item_type: str,
        item_id: int,
    ) -> bool:
        """
        Export the tags of an item owned by the user.

        Returns:
            True if any tag was written
        """
        names = await self.get_item_tags(component, item_type, item_id)
        if not names:
            return False

        await writer.export_related_data(container_id, path, "tags", names)
        return True

    async def delete_item_tags(
        self,
        container_id: int,
        component: str,
        item_type: str,
        item_ids: Select | list[int] | None = None,
    ) -> int:
        """
        Remove tag instances from items in a container.

        Args:
            container_id: Container of the tagged items
            component: Owning component
            item_type: Item type within the component
            item_ids: Restrict to these items (all items when None)

        Returns:
            Number of removed tag instances
        """
        statement = delete(TagInstance).where(
            TagInstance.container_id == container_id,
            TagInstance.component == component,
            TagInstance.item_type == item_type,
        )
        if item_ids is not None:
            statement = statement.where(TagInstance.item_id.in_(item_ids))

        result = await self.db.execute(statement.execution_options(synchronize_session=False))
        logger.debug(
            f"Removed {result.rowcount} tag instances in container {container_id} "
            f"({component}/{item_type})"
        )
        return result.rowcount
