"""
Claim lifecycle.

    pending -> eligible -> submitted -> approved | rejected
    eligible | submitted -> expired   (administrative only)

Claims are prepared here and handed to the passenger with a pre-filled form
snapshot. Nothing in this module submits a claim to the operator.

Business-rule refusals come back as Err(ClaimError); they are never raised.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from railclaim.claims.form_data import build_claim_form_data, generate_claim_portal_url, validate_form_data
from railclaim.claims.types import (
    ADMIN_STATUSES,
    SUBMITTABLE_STATUSES,
    ClaimError,
    ClaimErrorCode,
    ClaimGenerationResult,
    ClaimWithFormData,
)
from railclaim.core.events import ClaimCreated, ClaimStatusChanged, ClaimSubmitted, EventBus
from railclaim.core.result import Err, Ok, Result
from railclaim.eligibility.deadline import get_claim_deadline
from railclaim.eligibility.types import EligibilityStatus
from railclaim.models.bookings import Booking
from railclaim.models.claims import Claim, ClaimStatus
from railclaim.models.users import User
from railclaim.utils.time import ensure_utc

logger = logging.getLogger(__name__)

IdLike = Union[uuid.UUID, str]


def _as_uuid(value: IdLike) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _err(code: ClaimErrorCode, message: str, **details: Any) -> Err[ClaimError]:
    return Err(ClaimError(code=code, message=message, details=details or None))


def _not_found(claim_id: IdLike) -> Err[ClaimError]:
    return _err(ClaimErrorCode.CLAIM_NOT_FOUND, "Claim not found", claim_id=str(claim_id))


def _db_error(message: str, e: Exception) -> Err[ClaimError]:
    logger.error("%s: %r", message, e)
    return _err(ClaimErrorCode.DATABASE_ERROR, message, error=repr(e))


def _already_exists(existing: Claim) -> Err[ClaimError]:
    return _err(
        ClaimErrorCode.CLAIM_ALREADY_EXISTS,
        "A claim already exists for this booking",
        claim_id=str(existing.id),
    )


class ClaimService:
    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or EventBus()

    # ---- create ----

    def create_claim(
        self,
        db: Session,
        booking: Booking,
        eligibility: EligibilityStatus,
        user_email: str,
    ) -> Result[ClaimGenerationResult, ClaimError]:
        """
        Create the single claim for a booking. Requires an eligible verdict.

        One claim per booking is enforced by the unique booking_id; a
        concurrent creator that loses the race gets CLAIM_ALREADY_EXISTS too.
        """
        if not eligibility.eligible or eligibility.compensation is None:
            return _err(
                ClaimErrorCode.NOT_ELIGIBLE,
                "Booking is not eligible for compensation",
                reason=eligibility.reason.value,
            )

        booking_id = booking.id
        compensation = eligibility.compensation
        claim = Claim(
            booking_id=booking_id,
            delay_minutes=compensation.delay_minutes,
            eligible_cash_amount=compensation.cash_amount,
            eligible_voucher_amount=compensation.voucher_amount,
            status=ClaimStatus.ELIGIBLE,
        )

        form_data = build_claim_form_data(booking, claim, user_email)
        missing = validate_form_data(form_data)
        if missing:
            return _err(ClaimErrorCode.MISSING_DATA, "Claim form is incomplete", fields=missing)

        try:
            existing = self._find_claim_for_booking(db, booking_id)
            if existing is not None:
                return _already_exists(existing)

            db.add(claim)
            db.commit()

        except IntegrityError as e:
            db.rollback()
            # unique booking_id lost to a concurrent creator, or the booking row is gone
            try:
                existing = self._find_claim_for_booking(db, booking_id)
            except SQLAlchemyError as lookup_error:
                return _db_error("Failed to load claim", lookup_error)
            if existing is None:
                return _db_error("Failed to create claim record", e)
            logger.info("Claim for booking %s created concurrently; keeping %s", booking_id, existing.id)
            return _already_exists(existing)
        except SQLAlchemyError as e:
            db.rollback()
            return _db_error("Failed to create claim record", e)

        logger.info(
            "Claim %s created booking=%s delay=%d cash=%s voucher=%s",
            claim.id,
            booking.id,
            claim.delay_minutes,
            claim.eligible_cash_amount,
            claim.eligible_voucher_amount,
        )
        self.events.publish(
            ClaimCreated(claim=claim, user_id=booking.user_id, booking_id=booking.id, form_data=form_data)
        )

        return Ok(
            ClaimGenerationResult(
                claim_id=claim.id,
                form_data=form_data,
                claim_portal_url=generate_claim_portal_url(),
                status=claim.status,
                deadline=get_claim_deadline(booking.journey_date),
            )
        )

    # ---- transitions ----

    def mark_as_submitted(self, db: Session, claim_id: IdLike, now: datetime) -> Result[Claim, ClaimError]:
        """The passenger confirms they filed the claim on the operator's portal."""
        try:
            row = self._load_claim_and_booking(db, claim_id)
        except SQLAlchemyError as e:
            return _db_error("Failed to load claim", e)
        if row is None:
            return _not_found(claim_id)
        claim, booking = row

        previous = ClaimStatus(claim.status)
        if previous not in SUBMITTABLE_STATUSES:
            return _err(
                ClaimErrorCode.INVALID_STATUS_TRANSITION,
                f"Cannot mark claim as submitted from status: {previous.value}",
                current_status=previous.value,
            )

        submitted_at = ensure_utc(now)
        try:
            claim.status = ClaimStatus.SUBMITTED
            claim.submitted_at = submitted_at
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            return _db_error("Failed to update claim status", e)

        logger.info("Claim %s %s -> submitted", claim.id, previous.value)
        self.events.publish(
            ClaimStatusChanged(
                claim_id=claim.id,
                previous_status=previous.value,
                new_status=ClaimStatus.SUBMITTED.value,
                user_id=booking.user_id,
            )
        )
        self.events.publish(
            ClaimSubmitted(claim_id=claim.id, user_id=booking.user_id, booking_id=booking.id, submitted_at=submitted_at)
        )
        return Ok(claim)

    def update_status(
        self,
        db: Session,
        claim_id: IdLike,
        new_status: Union[ClaimStatus, str],
    ) -> Result[Claim, ClaimError]:
        """
        Administrative outcome (approved / rejected / expired). Applied from any
        current status; no transition validation.
        """
        try:
            target = ClaimStatus(new_status)
        except ValueError:
            target = None
        if target not in ADMIN_STATUSES:
            return _err(
                ClaimErrorCode.INVALID_STATUS_TRANSITION,
                f"Status cannot be set administratively: {new_status}",
                requested_status=str(getattr(new_status, "value", new_status)),
            )

        try:
            row = self._load_claim_and_booking(db, claim_id)
        except SQLAlchemyError as e:
            return _db_error("Failed to load claim", e)
        if row is None:
            return _not_found(claim_id)
        claim, booking = row

        previous = ClaimStatus(claim.status)
        try:
            claim.status = target
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            return _db_error("Failed to update claim status", e)

        logger.info("Claim %s %s -> %s (admin)", claim.id, previous.value, target.value)
        self.events.publish(
            ClaimStatusChanged(
                claim_id=claim.id,
                previous_status=previous.value,
                new_status=target.value,
                user_id=booking.user_id,
            )
        )
        return Ok(claim)

    # ---- reads ----

    def get_claim(self, db: Session, claim_id: IdLike) -> Result[ClaimWithFormData, ClaimError]:
        cid = _as_uuid(claim_id)
        if cid is None:
            return _not_found(claim_id)
        return self._get_with_form_data(db, Claim.id == cid, lambda: _not_found(claim_id))

    def get_claim_by_booking_id(self, db: Session, booking_id: IdLike) -> Result[ClaimWithFormData, ClaimError]:
        def missing():
            return _err(ClaimErrorCode.CLAIM_NOT_FOUND, "No claim found for this booking", booking_id=str(booking_id))

        bid = _as_uuid(booking_id)
        if bid is None:
            return missing()
        return self._get_with_form_data(db, Claim.booking_id == bid, missing)

    def list_user_claims(
        self,
        db: Session,
        user_id: IdLike,
        *,
        status: Optional[ClaimStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[ClaimWithFormData]:
        uid = _as_uuid(user_id)
        user = db.get(User, uid) if uid is not None else None
        if user is None:
            return []

        stmt = (
            select(Claim, Booking)
            .join(Booking, Claim.booking_id == Booking.id)
            .where(Booking.user_id == user.id)
            .order_by(Claim.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(Claim.status == ClaimStatus(status))
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        url = generate_claim_portal_url()
        return [
            ClaimWithFormData(claim=claim, form_data=build_claim_form_data(booking, claim, user.email), claim_portal_url=url)
            for claim, booking in db.execute(stmt).all()
        ]

    # ---- helpers ----

    def _find_claim_for_booking(self, db: Session, booking_id) -> Optional[Claim]:
        return db.execute(select(Claim).where(Claim.booking_id == booking_id).limit(1)).scalars().first()

    def _load_claim_and_booking(self, db: Session, claim_id: IdLike) -> Optional[tuple[Claim, Booking]]:
        cid = _as_uuid(claim_id)
        if cid is None:
            return None
        row = db.execute(
            select(Claim, Booking).join(Booking, Claim.booking_id == Booking.id).where(Claim.id == cid).limit(1)
        ).first()
        return (row[0], row[1]) if row else None

    def _get_with_form_data(self, db: Session, condition, missing) -> Result[ClaimWithFormData, ClaimError]:
        try:
            row = db.execute(
                select(Claim, Booking, User.email)
                .join(Booking, Claim.booking_id == Booking.id)
                .join(User, Booking.user_id == User.id)
                .where(condition)
                .limit(1)
            ).first()
        except SQLAlchemyError as e:
            return _db_error("Failed to load claim", e)

        if row is None:
            return missing()

        claim, booking, email = row
        return Ok(
            ClaimWithFormData(
                claim=claim,
                form_data=build_claim_form_data(booking, claim, email),
                claim_portal_url=generate_claim_portal_url(),
            )
        )
