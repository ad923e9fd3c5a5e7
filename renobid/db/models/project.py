import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from renobid.common.enums import ProjectStatus
from renobid.config import settings
from renobid.db.base import BaseModel


class Project(BaseModel):
    """Renovation project a homeowner publishes for bidding.

    Owned by the project module; the bidding core only reads it.
    """

    __tablename__ = "projects"

    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProjectStatus.DRAFT.value
    )
    bid_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_bids: Mapped[int] = mapped_column(Integer, nullable=False, default=settings.DEFAULT_MAX_BIDS)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("User", lazy="selectin")
