"""
Booking state machine for one (member, slot) pair.

    NoRecord  --book-->   Confirmed   (insert)
    Cancelled --book-->   Confirmed   (same row flipped back, fresh membership)
    Confirmed --book-->   AlreadyBooked
    Confirmed --cancel--> Cancelled
    Cancelled --cancel--> BookingNotActive
    NoRecord  --cancel--> NotFound

Every write path runs inside one `atomic()` block. `book()` opens it by
bumping the slot's lock_version, which takes the row lock on PostgreSQL and
the database write lock on SQLite before anything is counted, so two
concurrent bookings for the same slot can never both see the last seat free.
The paying membership row is then read FOR UPDATE, so one member booking
different slots in parallel cannot spend the same credit twice.
The (user_id, timeslot_id) unique constraint backs this up: an
IntegrityError on insert is reported as AlreadyBooked.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from models.db import atomic
from models.booking import Booking, BOOKING_CANCELLED, BOOKING_CONFIRMED
from models.time_slot import TimeSlot
from services.availability import AvailabilityVerdict, DENIALS, can_book
from services.entitlements import check_credits
from services.errors import (
    AlreadyBooked,
    BookingNotActive,
    Forbidden,
    NotFound,
    SlotNotFound,
)


@dataclass
class BookingOutcome:
    id: int
    timeslot_id: int
    status: str
    membership_id: int
    rebooked: bool = False

    def to_dict(self):
        return {"id": self.id, "timeslotId": self.timeslot_id, "status": self.status}


def _lock_slot(session, timeslot_id: int) -> bool:
    result = session.execute(
        update(TimeSlot)
        .where(TimeSlot.id == timeslot_id)
        .values(lock_version=TimeSlot.lock_version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def book(user_id: int, timeslot_id: int, now: datetime = None) -> BookingOutcome:
    now = now or datetime.now()

    try:
        with atomic() as session:
            if not _lock_slot(session, timeslot_id):
                raise SlotNotFound()

            slot = session.get(TimeSlot, timeslot_id, populate_existing=True)
            existing = (
                Booking.query
                .filter_by(user_id=user_id, timeslot_id=timeslot_id)
                .populate_existing()
                .first()
            )

            verdict = can_book(slot, now)
            if verdict in (AvailabilityVerdict.CANCELLED, AvailabilityVerdict.PAST):
                raise DENIALS[verdict]()
            # A holder hitting "book" again hears AlreadyBooked, not SlotFull
            if existing is not None and existing.status == BOOKING_CONFIRMED:
                raise AlreadyBooked()
            if verdict is AvailabilityVerdict.FULL:
                raise DENIALS[verdict]()

            credits = check_credits(user_id, now, lock=True)
            credits.raise_for_denial()

            if existing is not None:
                existing.status = BOOKING_CONFIRMED
                existing.membership_id = credits.membership_id
                existing.cancelled_at = None
                existing.cancellation_reason = None
                booking = existing
            else:
                booking = Booking(
                    user_id=user_id,
                    timeslot_id=timeslot_id,
                    membership_id=credits.membership_id,
                    status=BOOKING_CONFIRMED,
                    created_at=now,
                )
                session.add(booking)

            session.flush()
            outcome = BookingOutcome(
                id=booking.id,
                timeslot_id=booking.timeslot_id,
                status=booking.status,
                membership_id=booking.membership_id,
                rebooked=existing is not None,
            )
    except IntegrityError:
        # uq_booking_user_timeslot: a parallel request inserted this pair first
        raise AlreadyBooked() from None

    return outcome


def cancel(booking_id: int, requesting_user_id: int, reason: Optional[str] = None, now: datetime = None) -> Booking:
    now = now or datetime.now()

    with atomic():
        booking = Booking.query.filter_by(id=booking_id).with_for_update().first()
        if booking is None:
            raise NotFound()
        if booking.user_id != requesting_user_id:
            raise Forbidden("You can only cancel your own bookings")
        if booking.status != BOOKING_CONFIRMED:
            raise BookingNotActive()

        # No credit refund needed: usage is recounted from confirmed rows
        booking.status = BOOKING_CANCELLED
        booking.cancelled_at = now
        booking.cancellation_reason = reason or None

    return booking
