"""
Accumulator of user ids found in one container.
"""

from collections.abc import Iterable

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession


class UserList:
    """
    User ids collected for a container, one category at a time.

    Ids are appended as found, so the same user may appear once per category
    that references them. ``user_ids`` gives the de-duplicated view.
    """

    def __init__(self, container_id: int) -> None:
        self.container_id = container_id
        self.entries: list[int] = []

    def add_users(self, user_ids: Iterable[int | None]) -> None:
        """Append user ids, ignoring empty values."""
        self.entries.extend(user_id for user_id in user_ids if user_id is not None)

    async def add_from_query(self, db: AsyncSession, query: Select) -> None:
        """Append the first column of every row returned by the query."""
        result = await db.execute(query)
        self.add_users(result.scalars().all())

    @property
    def user_ids(self) -> list[int]:
        """Distinct user ids in ascending order."""
        return sorted(set(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<UserList container={self.container_id} users={self.user_ids}>"
