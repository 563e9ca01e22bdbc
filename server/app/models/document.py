from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.time import utcnow
from app.models.base import Base


class Document(Base):
    """A published PDF. Rows are append-only; classification fields are canonical."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    file_location: Mapped[str] = mapped_column(String(1024))
    subject: Mapped[str] = mapped_column(String(255), index=True)
    class_name: Mapped[str] = mapped_column(String(255), index=True)
    school: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    owner: Mapped["User"] = relationship("User", back_populates="documents")
