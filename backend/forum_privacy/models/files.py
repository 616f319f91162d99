"""
Stored file model for per-item file areas.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from forum_privacy.core.database import Base


class StoredFile(Base):
    """File kept in an area of a component item (e.g. a post attachment)."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    container_id: Mapped[int] = mapped_column(ForeignKey("containers.id"), index=True)
    component: Mapped[str] = mapped_column(String(100))
    file_area: Mapped[str] = mapped_column(String(50))
    item_id: Mapped[int] = mapped_column(Integer, index=True)

    file_path: Mapped[str] = mapped_column(String(255), default="/")
    file_name: Mapped[str] = mapped_column(String(255))
    mime_type: Mapped[str | None] = mapped_column(String(100))
    content: Mapped[bytes] = mapped_column(LargeBinary)
    author_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<StoredFile {self.file_area}:{self.item_id}{self.file_path}{self.file_name}>"
