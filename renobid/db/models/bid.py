import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Float, ForeignKey, Index, Numeric, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from renobid.common.enums import BidStatus
from renobid.db.base import BaseModel, VersionMixin

# statuses that free the (project, contractor) slot for a new bid
RELEASED_STATUSES = (BidStatus.WITHDRAWN.value, BidStatus.REJECTED.value)

_ACTIVE_PREDICATE = text("status NOT IN ('withdrawn', 'rejected')")

CODE_CONSTRAINT = "uq_bids_code"


class Bid(BaseModel, VersionMixin):
    __tablename__ = "bids"
    __table_args__ = (
        UniqueConstraint("code", name=CODE_CONSTRAINT),
        Index(
            "uq_bids_active_project_contractor",
            "project_id",
            "contractor_id",
            unique=True,
            postgresql_where=_ACTIVE_PREDICATE,
            sqlite_where=_ACTIVE_PREDICATE,
        ),
        Index("ix_bids_project_status", "project_id", "status"),
    )

    code: Mapped[str] = mapped_column(String(20), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True
    )
    contractor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    timeline: Mapped[str] = mapped_column(String(255), nullable=False)
    proposal: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[list | None] = mapped_column(JSONB, nullable=True, default=list)
    response_time_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BidStatus.PENDING.value
    )

    # Admin review
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    project = relationship("Project", lazy="selectin")
    contractor = relationship("User", foreign_keys=[contractor_id], lazy="selectin")
