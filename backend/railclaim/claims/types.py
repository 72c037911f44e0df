from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from railclaim.models.claims import Claim, ClaimStatus


class ClaimErrorCode(str, enum.Enum):
    CLAIM_ALREADY_EXISTS = "CLAIM_ALREADY_EXISTS"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    CLAIM_NOT_FOUND = "CLAIM_NOT_FOUND"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    MISSING_DATA = "MISSING_DATA"
    DATABASE_ERROR = "DATABASE_ERROR"


@dataclass(frozen=True)
class ClaimError:
    code: ClaimErrorCode
    message: str
    details: Optional[dict[str, Any]] = None


class ClaimFormData(BaseModel):
    """Everything the passenger needs to fill in the operator's claim form."""

    pnr: str = Field(..., description="Booking reference, 6 alphanumeric characters")
    tcn: str = Field(..., description="Ticket control number")
    first_name: str
    last_name: str
    email: str
    train_number: str
    journey_date: str = Field(..., description="DD/MM/YYYY")
    origin: str = Field(..., description="Station display name")
    destination: str = Field(..., description="Station display name")
    delay_minutes: int
    eligible_cash_amount: Decimal
    eligible_voucher_amount: Decimal


@dataclass(frozen=True)
class ClaimGenerationResult:
    claim_id: Any
    form_data: ClaimFormData
    claim_portal_url: str
    status: ClaimStatus
    deadline: datetime


@dataclass(frozen=True)
class ClaimWithFormData:
    claim: Claim
    form_data: ClaimFormData
    claim_portal_url: str


# Statuses an administrator may set directly.
ADMIN_STATUSES = (ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.EXPIRED)

# Statuses from which a user may mark the claim as submitted.
SUBMITTABLE_STATUSES = (ClaimStatus.PENDING, ClaimStatus.ELIGIBLE)

STATION_NAMES: dict[str, str] = {
    # UK
    "GBSPX": "London St Pancras",
    "GBEBS": "Ebbsfleet International",
    "GBASH": "Ashford International",
    # France
    "FRPLY": "Paris Gare du Nord",
    "FRLIL": "Lille Europe",
    "FRCFK": "Calais Fréthun",
    # Belgium
    "BEBMI": "Brussels Midi",
    # Netherlands
    "NLAMA": "Amsterdam Centraal",
    "NLRTD": "Rotterdam Centraal",
    # Germany
    "DECGN": "Cologne Hbf",
}

CLAIM_PORTAL_URL = "https://www.eurostar.com/uk-en/travel-info/service-information/delay-compensation"
