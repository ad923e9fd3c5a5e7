from sqlalchemy import Boolean, Float, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from renobid.common.enums import UserRole, VerificationStatus
from renobid.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.HOMEOWNER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    preferences: Mapped[dict | None] = mapped_column(JSONB, nullable=True, default=dict)

    # Contractor profile
    verification_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value
    )
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    total_projects: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    ranking = relationship(
        "ContractorRanking", back_populates="contractor", uselist=False, lazy="selectin"
    )
