"""
Rating model.

Ratings belong to the rating subsystem; forum code only reaches them through
``RatingService``.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from forum_privacy.core.database import Base


class Rating(Base):
    """Rating given by a user to an item of some component."""

    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    container_id: Mapped[int] = mapped_column(ForeignKey("containers.id"), index=True)
    component: Mapped[str] = mapped_column(String(100))
    rating_area: Mapped[str] = mapped_column(String(50))
    item_id: Mapped[int] = mapped_column(Integer, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    scale_id: Mapped[int] = mapped_column(Integer, default=100)
    value: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Rating {self.value} on {self.component}/{self.rating_area}:{self.item_id}>"
