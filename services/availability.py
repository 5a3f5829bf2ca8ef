from datetime import datetime
from enum import Enum

from models.booking import Booking, BOOKING_CONFIRMED
from services.errors import SlotCancelled, SlotFull, SlotInPast
from utils.dates import slot_start


class AvailabilityVerdict(str, Enum):
    AVAILABLE = "available"
    CANCELLED = "cancelled"
    PAST = "past"
    FULL = "full"


# Verdict -> error raised when someone tries to book anyway
DENIALS = {
    AvailabilityVerdict.CANCELLED: SlotCancelled,
    AvailabilityVerdict.PAST: SlotInPast,
    AvailabilityVerdict.FULL: SlotFull,
}


def count_confirmed_for_slot(slot_id: int) -> int:
    return Booking.query.filter_by(timeslot_id=slot_id, status=BOOKING_CONFIRMED).count()


def can_book(slot, now: datetime = None, booked_count: int = None) -> AvailabilityVerdict:
    """
    First match wins: cancelled, then past, then full.
    `booked_count` lets callers that already aggregated counts skip the query.
    """
    now = now or datetime.now()

    if slot.is_cancelled:
        return AvailabilityVerdict.CANCELLED

    if slot_start(slot) < now:
        return AvailabilityVerdict.PAST

    if booked_count is None:
        booked_count = count_confirmed_for_slot(slot.id)
    if booked_count >= slot.capacity:
        return AvailabilityVerdict.FULL

    return AvailabilityVerdict.AVAILABLE
