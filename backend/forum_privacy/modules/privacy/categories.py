"""
Declarative table of the places forum data references a user.

The locator, the reverse locator and the eraser all iterate
``DATA_CATEGORIES``, so a table added here is found, enumerated and purged
in one step.
"""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, Delete, Select, delete, select

from forum_privacy.models.forum import (
    DigestPreference,
    Discussion,
    DiscussionSubscription,
    Post,
    QueueItem,
    ReadMarker,
    Subscription,
    TrackingPreference,
)

# Component, areas and item types the forum registers with collaborators
COMPONENT = "forum"
RATING_AREA = "post"
TAG_ITEM_TYPE = "forum_posts"
POST_FILE_AREA = "post"
ATTACHMENT_FILE_AREA = "attachment"
INTRO_FILE_AREA = "intro"


class Erasure(str, Enum):
    """What happens to a category's rows when a user's data is erased."""

    DELETE = "delete"
    REDACT = "redact"
    KEEP = "keep"


@dataclass(frozen=True)
class DataCategory:
    """
    One kind of row that references a user inside a forum.

    A category is scoped to forums either by a forum column on the row itself
    or, for rows that only know their discussion, through ``Discussion``.
    """

    name: str
    model: Any
    user_column: Any
    forum_column: Any = None
    discussion_column: Any = None
    erasure: Erasure = Erasure.DELETE
    locatable: bool = True

    def __post_init__(self) -> None:
        if (self.forum_column is None) == (self.discussion_column is None):
            raise ValueError(
                f"Category {self.name} needs exactly one of forum_column or discussion_column"
            )

    @property
    def forum_ref(self) -> Any:
        """Column holding the forum id once the category is joined."""
        if self.forum_column is not None:
            return self.forum_column
        return Discussion.forum_id

    def _select(self, column: Any) -> Select:
        query = select(column).select_from(self.model)
        if self.discussion_column is not None:
            query = query.join(Discussion, Discussion.id == self.discussion_column)
        return query

    def select_forum_ids(self, user_id: int) -> Select:
        """Forums holding at least one row of this category for the user."""
        return self._select(self.forum_ref).where(self.user_column == user_id)

    def select_user_ids(self, forum_id: int) -> Select:
        """Distinct users with a row of this category in the forum."""
        return self._select(self.user_column).where(self.forum_ref == forum_id).distinct()

    def in_forums(self, forum_ids: Collection[int]) -> ColumnElement[bool]:
        """Filter restricting this category's rows to the given forums."""
        if self.forum_column is not None:
            return self.forum_column.in_(forum_ids)
        return self.discussion_column.in_(
            select(Discussion.id).where(Discussion.forum_id.in_(forum_ids))
        )

    def delete_rows(
        self,
        forum_ids: Collection[int],
        user_ids: Collection[int] | None = None,
    ) -> Delete:
        """Delete statement for rows in the forums, optionally for some users only."""
        statement = delete(self.model).where(self.in_forums(forum_ids))
        if user_ids is not None:
            statement = statement.where(self.user_column.in_(user_ids))
        return statement.execution_options(synchronize_session=False)


DISCUSSION_AUTHORS = DataCategory(
    name="discussion_authors",
    model=Discussion,
    user_column=Discussion.author_id,
    forum_column=Discussion.forum_id,
    erasure=Erasure.KEEP,
)

POST_AUTHORS = DataCategory(
    name="post_authors",
    model=Post,
    user_column=Post.author_id,
    discussion_column=Post.discussion_id,
    erasure=Erasure.REDACT,
)

DIGESTS = DataCategory(
    name="digests",
    model=DigestPreference,
    user_column=DigestPreference.user_id,
    forum_column=DigestPreference.forum_id,
)

SUBSCRIPTIONS = DataCategory(
    name="subscriptions",
    model=Subscription,
    user_column=Subscription.user_id,
    forum_column=Subscription.forum_id,
)

TRACKING_PREFERENCES = DataCategory(
    name="tracking_preferences",
    model=TrackingPreference,
    user_column=TrackingPreference.user_id,
    forum_column=TrackingPreference.forum_id,
)

READ_MARKERS = DataCategory(
    name="read_markers",
    model=ReadMarker,
    user_column=ReadMarker.user_id,
    forum_column=ReadMarker.forum_id,
)

DISCUSSION_SUBSCRIPTIONS = DataCategory(
    name="discussion_subscriptions",
    model=DiscussionSubscription,
    user_column=DiscussionSubscription.user_id,
    forum_column=DiscussionSubscription.forum_id,
)

# Digest batching state: purged with the user, never reported as user data
QUEUE = DataCategory(
    name="queue",
    model=QueueItem,
    user_column=QueueItem.user_id,
    discussion_column=QueueItem.discussion_id,
    locatable=False,
)

DATA_CATEGORIES: tuple[DataCategory, ...] = (
    DISCUSSION_AUTHORS,
    POST_AUTHORS,
    DIGESTS,
    SUBSCRIPTIONS,
    TRACKING_PREFERENCES,
    READ_MARKERS,
    DISCUSSION_SUBSCRIPTIONS,
    QUEUE,
)


def locatable_categories() -> list[DataCategory]:
    """Categories that count as user data when locating users and forums."""
    return [category for category in DATA_CATEGORIES if category.locatable]


def categories_with(erasure: Erasure) -> list[DataCategory]:
    """Categories erased the given way."""
    return [category for category in DATA_CATEGORIES if category.erasure is erasure]


def select_forum_post_ids(forum_ids: Collection[int]) -> Select:
    """Ids of every post in the forums."""
    return select(Post.id).where(POST_AUTHORS.in_forums(forum_ids))


def select_authored_post_ids(
    forum_ids: Collection[int],
    user_ids: Collection[int],
) -> Select:
    """Ids of posts in the forums written by any of the users."""
    return select(Post.id).where(
        POST_AUTHORS.in_forums(forum_ids),
        Post.author_id.in_(user_ids),
    )
