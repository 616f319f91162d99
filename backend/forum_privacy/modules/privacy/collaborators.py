"""
Interfaces of the components the privacy module delegates to.

The default implementations live in their own modules
(``RatingService``, ``TagService``, ``FileStorageService``,
``FileSystemExportWriter``); anything matching these protocols can be
passed instead.
"""

from typing import Any, Protocol

from sqlalchemy import Select

from forum_privacy.modules.privacy.userlist import UserList


class ExportWriter(Protocol):
    """
    Destination for exported user data.

    Every document is addressed by a container id plus an ordered list of
    human-readable path segments (discussion, "Posts", post, ...). An empty
    path is the container itself.
    """

    async def export_data(
        self, container_id: int, path: list[str], data: dict[str, Any]
    ) -> None:
        """Store the main document at a path."""
        ...

    async def export_metadata(
        self,
        container_id: int,
        path: list[str],
        key: str,
        value: Any,
        description: str,
    ) -> None:
        """Store a single described fact at a path."""
        ...

    async def export_related_data(
        self, container_id: int, path: list[str], name: str, data: Any
    ) -> None:
        """Store data owned by another component next to a document."""
        ...

    async def export_area_files(
        self,
        container_id: int,
        path: list[str],
        component: str,
        file_area: str,
        item_id: int,
    ) -> None:
        """Store every file of a file area at a path."""
        ...

    def rewrite_embedded_references(
        self,
        container_id: int,
        path: list[str],
        component: str,
        file_area: str,
        item_id: int,
        text: str,
    ) -> str:
        """Point embedded file references in text at the exported files."""
        ...

    async def export_user_preference(
        self, component: str, key: str, value: Any, description: str
    ) -> None:
        """Store a site-wide preference of the user."""
        ...


class RatingProvider(Protocol):
    """Ratings on items of other components."""

    def select_rated_item_ids(
        self, component: str, rating_area: str, user_id: int
    ) -> Select:
        ...

    async def add_users_for_items(
        self, users: UserList, component: str, rating_area: str, item_ids: Select
    ) -> None:
        ...

    async def export_ratings(
        self,
        writer: ExportWriter,
        user_id: int,
        container_id: int,
        path: list[str],
        component: str,
        rating_area: str,
        item_id: int,
        include_all: bool,
    ) -> bool:
        ...

    async def delete_ratings(
        self,
        container_id: int,
        component: str,
        rating_area: str,
        item_ids: Select | list[int] | None = None,
        user_ids: Select | list[int] | None = None,
    ) -> int:
        ...


class TagProvider(Protocol):
    """Tags applied to items of other components."""

    async def export_item_tags(
        self,
        writer: ExportWriter,
        user_id: int,
        container_id: int,
        path: list[str],
        component: str,
        item_type: str,
        item_id: int,
    ) -> bool:
        ...

    async def delete_item_tags(
        self,
        container_id: int,
        component: str,
        item_type: str,
        item_ids: Select | list[int] | None = None,
    ) -> int:
        ...


class FileStorage(Protocol):
    """Files kept in component file areas."""

    async def delete_area_files(
        self,
        container_id: int,
        component: str,
        file_area: str,
        item_ids: Select | list[int] | None = None,
    ) -> int:
        ...


class PlagiarismProvider(Protocol):
    """Plagiarism detection data kept about submitted content."""

    async def export_user_data(
        self,
        writer: ExportWriter,
        user_id: int,
        container_id: int,
        path: list[str],
        metadata: dict[str, Any],
    ) -> None:
        ...


class CacheInvalidator(Protocol):
    """Told which forums had rows removed so cached state can be rebuilt."""

    async def invalidate(self, forum_ids: set[int]) -> None:
        ...


class NullPlagiarismProvider:
    """Plagiarism provider for sites without plagiarism detection."""

    async def export_user_data(
        self,
        writer: ExportWriter,
        user_id: int,
        container_id: int,
        path: list[str],
        metadata: dict[str, Any],
    ) -> None:
        return None
