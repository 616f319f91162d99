"""
Tag models.

Includes:
- Tags (shared vocabulary)
- Tag instances (a tag applied to an item of some component)
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_privacy.core.database import Base


class Tag(Base):
    """Tag name."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    raw_name: Mapped[str] = mapped_column(String(100))

    instances: Mapped[list["TagInstance"]] = relationship(back_populates="tag")

    def __repr__(self) -> str:
        return f"<Tag {self.name}>"


class TagInstance(Base):
    """Tag applied to one item."""

    __tablename__ = "tag_instances"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tag_id: Mapped[int] = mapped_column(ForeignKey("tags.id"))
    container_id: Mapped[int] = mapped_column(ForeignKey("containers.id"), index=True)
    component: Mapped[str] = mapped_column(String(100))
    item_type: Mapped[str] = mapped_column(String(100))
    item_id: Mapped[int] = mapped_column(Integer, index=True)
    tagger_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))
    ordering: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    tag: Mapped["Tag"] = relationship(back_populates="instances")
