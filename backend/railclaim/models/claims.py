import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.sql import func
from railclaim.core.db import Base


class ClaimStatus(str, enum.Enum):
    PENDING = "pending"
    ELIGIBLE = "eligible"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Claim(Base):
    __tablename__ = "claims"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)

    delay_minutes = Column(Integer, nullable=False)
    eligible_cash_amount = Column(Numeric(10, 2), nullable=True)
    eligible_voucher_amount = Column(Numeric(10, 2), nullable=True)

    status = Column(
        Enum(ClaimStatus, name="claim_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ClaimStatus.PENDING,
        index=True,
    )
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
