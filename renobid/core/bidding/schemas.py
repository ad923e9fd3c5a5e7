from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class BidAttachment(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=1000)
    type: str = Field(min_length=1, max_length=100)
    size: int = Field(ge=0)


class BidCreate(BaseModel):
    project_id: uuid.UUID
    price: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    timeline: str = Field(min_length=1, max_length=255)
    proposal: str = Field(min_length=1, max_length=5000)
    attachments: list[BidAttachment] = Field(default_factory=list, max_length=10)


class BidUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    price: Decimal | None = Field(default=None, gt=0, max_digits=15, decimal_places=2)
    timeline: str | None = Field(default=None, min_length=1, max_length=255)
    proposal: str | None = Field(default=None, min_length=1, max_length=5000)
    attachments: list[BidAttachment] | None = Field(default=None, max_length=10)

    model_config = {"extra": "forbid"}


class ApproveBidRequest(BaseModel):
    note: str | None = Field(default=None, max_length=2000)


class RejectBidRequest(BaseModel):
    note: str = Field(min_length=1, max_length=2000)

    @field_validator("note")
    @classmethod
    def note_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("A rejection note is required")
        return v


# ---------- Read models ----------


class BidProjectSummary(BaseModel):
    id: uuid.UUID
    code: str
    title: str
    status: str
    bid_deadline: datetime | None

    model_config = {"from_attributes": True}


class BidContractorSummary(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None
    rating: float
    total_projects: int
    verification_status: str


class BidDetail(BaseModel):
    """Full bid view for the bidding contractor and for admins."""

    id: uuid.UUID
    code: str
    project_id: uuid.UUID
    contractor_id: uuid.UUID
    price: Decimal
    timeline: str
    proposal: str
    attachments: list[BidAttachment]
    response_time_hours: float | None
    status: str
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime | None
    review_note: str | None
    created_at: datetime
    updated_at: datetime
    project: BidProjectSummary
    contractor: BidContractorSummary


class AnonymousBid(BaseModel):
    """Homeowner view of a bid. Carries nothing that identifies the contractor."""

    id: uuid.UUID
    code: str
    anonymous_name: str
    contractor_rating: float
    contractor_total_projects: int
    contractor_completed_projects: int
    price: Decimal
    timeline: str
    proposal: str
    attachments: list[BidAttachment]
    status: str
    created_at: datetime
