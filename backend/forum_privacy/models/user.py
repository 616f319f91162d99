"""
User model and site-wide preferences.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_privacy.core.database import Base

if TYPE_CHECKING:
    from forum_privacy.models.forum import Discussion, Post


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    # Site-wide forum defaults
    mail_digest: Mapped[int] = mapped_column(Integer, default=0)
    auto_subscribe: Mapped[bool] = mapped_column(Boolean, default=True)
    track_forums: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    # Relationships
    forum_discussions: Mapped[list["Discussion"]] = relationship(
        back_populates="author"
    )
    forum_posts: Mapped[list["Post"]] = relationship(back_populates="author")
    preferences: Mapped[list["UserPreference"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class UserPreference(Base):
    """Free-form named preference."""

    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    value: Mapped[str | None] = mapped_column(Text)

    user: Mapped["User"] = relationship(back_populates="preferences")
