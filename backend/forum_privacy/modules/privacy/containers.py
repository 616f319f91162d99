"""
Resolution of container ids to the forums they anchor.
"""

from collections.abc import Collection

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_privacy.models.forum import Container, ContainerKind, Forum


def select_forum_containers(container_ids: Collection[int]) -> Select:
    """Rows of (container, forum) for the ids that anchor an existing forum."""
    return (
        select(Container, Forum)
        .join(Forum, Forum.id == Container.instance_id)
        .where(
            Container.id.in_(container_ids),
            Container.kind == ContainerKind.FORUM,
        )
        .order_by(Container.id)
    )


async def resolve_forums(
    db: AsyncSession,
    container_ids: Collection[int],
) -> list[tuple[Container, Forum]]:
    """
    Resolve containers to forums.

    Ids that do not exist, anchor something other than a forum, or point at
    a forum that no longer exists are left out.
    """
    if not container_ids:
        return []
    result = await db.execute(select_forum_containers(container_ids))
    return [(container, forum) for container, forum in result.all()]


async def resolve_forum(
    db: AsyncSession,
    container_id: int,
) -> tuple[Container, Forum] | None:
    """Resolve one container to its forum, or None."""
    resolved = await resolve_forums(db, [container_id])
    return resolved[0] if resolved else None
