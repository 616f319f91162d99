"""
Database models.

Importing this package registers every table on ``Base.metadata``.
"""

from forum_privacy.models.files import StoredFile
from forum_privacy.models.forum import (
    DISCUSSION_UNSUBSCRIBED,
    Container,
    ContainerKind,
    DigestMode,
    DigestPreference,
    Discussion,
    DiscussionSubscription,
    Forum,
    MessageFormat,
    Post,
    QueueItem,
    ReadMarker,
    Subscription,
    TrackingPreference,
)
from forum_privacy.models.rating import Rating
from forum_privacy.models.tagging import Tag, TagInstance
from forum_privacy.models.user import User, UserPreference

__all__ = [
    "DISCUSSION_UNSUBSCRIBED",
    "Container",
    "ContainerKind",
    "DigestMode",
    "DigestPreference",
    "Discussion",
    "DiscussionSubscription",
    "Forum",
    "MessageFormat",
    "Post",
    "QueueItem",
    "Rating",
    "ReadMarker",
    "StoredFile",
    "Subscription",
    "Tag",
    "TagInstance",
    "TrackingPreference",
    "User",
    "UserPreference",
]
