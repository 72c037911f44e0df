import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from railclaim.models.bookings import Booking
from railclaim.models.trains import Train

COMPENSATION_THRESHOLD_MINUTES = 60


class JourneyStatus(str, enum.Enum):
    PENDING = "pending"            # journey has not started yet
    IN_PROGRESS = "in_progress"    # between departure and arrival + buffer
    COMPLETED = "completed"        # past scheduled arrival + buffer
    UNKNOWN = "unknown"            # journey day reached but no train record


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    train: Optional[Train]
    reason: Optional[str] = None   # "not_found" when unmatched


@dataclass(frozen=True)
class JourneyCheckResult:
    booking_id: Any
    status: JourneyStatus
    delay_minutes: Optional[int]
    train: Optional[Train]
    checked_at: datetime


@dataclass(frozen=True)
class CompletedBooking:
    booking: Booking
    train: Train
    delay_minutes: int
    completed_at: datetime


@dataclass
class ProcessingResult:
    processed: int = 0
    completed: list[CompletedBooking] = field(default_factory=list)
    skipped: int = 0
    in_progress: int = 0
    already_final: int = 0          # final delay written by another run first
    errors: list[dict] = field(default_factory=list)

    @property
    def eligible_for_claim(self) -> int:
        return sum(1 for c in self.completed if c.delay_minutes >= COMPENSATION_THRESHOLD_MINUTES)

    def summary(self) -> dict:
        return {
            "processed": self.processed,
            "completed": len(self.completed),
            "skipped": self.skipped,
            "in_progress": self.in_progress,
            "already_final": self.already_final,
            "eligible_for_claim": self.eligible_for_claim,
            "errors": len(self.errors),
        }
