"""
Forum models for community discussions.

Includes:
- Containers (anchors that resolve to a forum instance)
- Forums, discussions and posts (reply trees)
- Per-user preference rows (digests, subscriptions, tracking, read state)
- The transient digest queue
"""

from datetime import datetime
from enum import Enum as PyEnum
from enum import IntEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_privacy.core.database import Base

if TYPE_CHECKING:
    from forum_privacy.models.user import User


class ContainerKind(str, PyEnum):
    """What a container anchors."""

    SITE = "site"
    CATEGORY = "category"
    FORUM = "forum"


class MessageFormat(IntEnum):
    """Declared format of a post message."""

    AUTO = 0
    HTML = 1
    PLAIN = 2
    MARKDOWN = 4


class DigestMode(IntEnum):
    """Email digest type for a forum."""

    OFF = 0
    COMPLETE = 1
    SUBJECTS = 2


# Discussion subscription preference recording an explicit opt-out
DISCUSSION_UNSUBSCRIBED = -1


class Container(Base):
    """Anchor for an owned piece of content, such as a forum instance."""

    __tablename__ = "containers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    kind: Mapped[ContainerKind] = mapped_column(Enum(ContainerKind), index=True)
    instance_id: Mapped[int] = mapped_column(Integer, index=True)

    def __repr__(self) -> str:
        return f"<Container {self.id} {self.kind.value}:{self.instance_id}>"


class Forum(Base):
    """Forum instance."""

    __tablename__ = "forums"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    intro: Mapped[str | None] = mapped_column(Text)
    intro_format: Mapped[int] = mapped_column(Integer, default=MessageFormat.HTML)
    force_subscribe: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    discussions: Mapped[list["Discussion"]] = relationship(back_populates="forum")

    def __repr__(self) -> str:
        return f"<Forum {self.name}>"


class Discussion(Base):
    """Discussion thread, rooted at its first post."""

    __tablename__ = "forum_discussions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    name: Mapped[str] = mapped_column(String(255))
    first_post_id: Mapped[int | None] = mapped_column(Integer)

    # Status
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    modified_by: Mapped[int | None] = mapped_column(Integer)

    # Relationships
    forum: Mapped["Forum"] = relationship(back_populates="discussions")
    author: Mapped["User"] = relationship(back_populates="forum_discussions")
    posts: Mapped[list["Post"]] = relationship(back_populates="discussion")

    def __repr__(self) -> str:
        return f"<Discussion {self.name[:30]}>"


class Post(Base):
    """Forum post or reply."""

    __tablename__ = "forum_posts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    discussion_id: Mapped[int] = mapped_column(
        ForeignKey("forum_discussions.id"), index=True
    )
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("forum_posts.id"))
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    subject: Mapped[str] = mapped_column(String(255), default="")
    message: Mapped[str] = mapped_column(Text, default="")
    message_format: Mapped[int] = mapped_column(Integer, default=MessageFormat.HTML)
    message_trust: Mapped[bool] = mapped_column(Boolean, default=False)

    # Status
    deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    has_attachment: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    modified_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    discussion: Mapped["Discussion"] = relationship(back_populates="posts")
    author: Mapped["User"] = relationship(back_populates="forum_posts")

    def __repr__(self) -> str:
        return f"<Post {self.id} in discussion {self.discussion_id}>"


# ==================== Per-user rows ====================


class DigestPreference(Base):
    """Digest type chosen by a user for one forum."""

    __tablename__ = "forum_digests"
    __table_args__ = (UniqueConstraint("forum_id", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    mail_digest: Mapped[int] = mapped_column(Integer, default=DigestMode.OFF)


class Subscription(Base):
    """User subscribed to a whole forum."""

    __tablename__ = "forum_subscriptions"
    __table_args__ = (UniqueConstraint("forum_id", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)


class TrackingPreference(Base):
    """User opted out of read tracking for one forum."""

    __tablename__ = "forum_track_prefs"
    __table_args__ = (UniqueConstraint("forum_id", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)


class ReadMarker(Base):
    """A post read by a user."""

    __tablename__ = "forum_read"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    discussion_id: Mapped[int] = mapped_column(ForeignKey("forum_discussions.id"))
    post_id: Mapped[int] = mapped_column(ForeignKey("forum_posts.id"), index=True)

    first_read: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_read: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class DiscussionSubscription(Base):
    """
    Per-discussion subscription preference.

    ``preference`` holds the subscription time (epoch seconds), or
    ``DISCUSSION_UNSUBSCRIBED`` when the user opted out of a discussion in a
    forum they would otherwise receive.
    """

    __tablename__ = "forum_discussion_subs"
    __table_args__ = (UniqueConstraint("discussion_id", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.id"), index=True)
    discussion_id: Mapped[int] = mapped_column(ForeignKey("forum_discussions.id"))
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    preference: Mapped[int] = mapped_column(Integer)


class QueueItem(Base):
    """Pending digest delivery. Transient, never exported."""

    __tablename__ = "forum_queue"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    discussion_id: Mapped[int] = mapped_column(ForeignKey("forum_discussions.id"))
    post_id: Mapped[int] = mapped_column(ForeignKey("forum_posts.id"))
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
