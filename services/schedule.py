"""
Read-side schedule view: slots in a date range with their confirmed-booking
counts, plus which of those slots the requesting member holds.
"""
from datetime import date, datetime

from sqlalchemy import func

from models import db
from models.booking import Booking, BOOKING_CONFIRMED
from models.time_slot import TimeSlot
from services.availability import can_book


def confirmed_counts(slot_ids) -> dict:
    if not slot_ids:
        return {}
    rows = (
        db.session.query(Booking.timeslot_id, func.count(Booking.id))
        .filter(Booking.timeslot_id.in_(slot_ids), Booking.status == BOOKING_CONFIRMED)
        .group_by(Booking.timeslot_id)
        .all()
    )
    return {slot_id: count for slot_id, count in rows}


def user_bookings_map(user_id: int, slot_ids=None) -> dict:
    """slot id -> booking id for the member's confirmed bookings."""
    q = Booking.query.filter_by(user_id=user_id, status=BOOKING_CONFIRMED)
    if slot_ids is not None:
        if not slot_ids:
            return {}
        q = q.filter(Booking.timeslot_id.in_(slot_ids))
    return {b.timeslot_id: b.id for b in q.all()}


def serialize_slot(slot: TimeSlot, booked_count: int, now: datetime) -> dict:
    return {
        "id": slot.id,
        "date": slot.date.isoformat(),
        "startTime": slot.start_time.strftime("%H:%M"),
        "endTime": slot.end_time.strftime("%H:%M"),
        "capacity": slot.capacity,
        "bookedCount": booked_count,
        "type": slot.type,
        "description": slot.description,
        "isCancelled": slot.is_cancelled,
        "status": can_book(slot, now, booked_count=booked_count).value,
    }


def project_schedule(user_id: int, start: date, end: date, now: datetime = None) -> dict:
    """Slots with start <= date <= end, ordered by (date, start time)."""
    now = now or datetime.now()

    slots = (
        TimeSlot.query
        .filter(TimeSlot.date >= start, TimeSlot.date <= end)
        .order_by(TimeSlot.date.asc(), TimeSlot.start_time.asc(), TimeSlot.id.asc())
        .all()
    )
    slot_ids = [s.id for s in slots]
    counts = confirmed_counts(slot_ids)
    mine = user_bookings_map(user_id, slot_ids)

    return {
        "timeSlots": [serialize_slot(s, counts.get(s.id, 0), now) for s in slots],
        # JSON object keys are strings
        "userBookings": {str(slot_id): booking_id for slot_id, booking_id in mine.items()},
    }
