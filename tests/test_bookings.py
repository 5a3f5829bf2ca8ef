from datetime import date, datetime, time

import pytest

from models import db
from models.booking import Booking
from models.time_slot import TimeSlot
from services import bookings
from services.availability import AvailabilityVerdict, can_book
from services.errors import (
    AlreadyBooked,
    BookingNotActive,
    Forbidden,
    NoActiveMembership,
    NotFound,
    SlotCancelled,
    SlotFull,
    SlotInPast,
    SlotNotFound,
)

from conftest import confirmed_count


@pytest.fixture
def unlimited(make_user, make_plan, make_membership):
    plan = make_plan()

    def _member():
        user = make_user()
        make_membership(user, plan)
        return user

    return _member


# ---------- availability ----------

def test_availability_precedence(make_slot, unlimited, now):
    # Cancelled beats past, past beats full
    past_cancelled = make_slot(day=date(2026, 3, 1), is_cancelled=True)
    assert can_book(past_cancelled, now) is AvailabilityVerdict.CANCELLED

    past_full = make_slot(day=date(2026, 3, 1), capacity=1)
    db.session.add(Booking(user_id=unlimited().id, timeslot_id=past_full.id, membership_id=1, created_at=now))
    db.session.commit()
    assert can_book(past_full, now) is AvailabilityVerdict.PAST

    assert can_book(make_slot(), now) is AvailabilityVerdict.AVAILABLE


def test_slot_starting_earlier_today_is_past(make_slot, now):
    today = now.date()
    assert can_book(make_slot(day=today, start=time(11, 59)), now) is AvailabilityVerdict.PAST
    assert can_book(make_slot(day=today, start=time(12, 0)), now) is AvailabilityVerdict.AVAILABLE
    assert can_book(make_slot(day=date(2026, 3, 14), start=time(23, 0)), now) is AvailabilityVerdict.PAST


# ---------- book ----------

def test_book_creates_confirmed_booking(unlimited, make_slot, now):
    user = unlimited()
    slot = make_slot()

    outcome = bookings.book(user.id, slot.id, now=now)

    assert outcome.status == "confirmed"
    assert outcome.timeslot_id == slot.id
    assert outcome.rebooked is False
    row = db.session.get(Booking, outcome.id)
    assert row.membership_id == outcome.membership_id
    assert row.created_at == now


def test_book_unknown_slot(unlimited, now):
    with pytest.raises(SlotNotFound):
        bookings.book(unlimited().id, 999, now=now)


def test_book_rejections(unlimited, make_slot, now):
    user = unlimited()
    with pytest.raises(SlotCancelled):
        bookings.book(user.id, make_slot(is_cancelled=True).id, now=now)
    with pytest.raises(SlotInPast):
        bookings.book(user.id, make_slot(day=date(2026, 3, 14)).id, now=now)


def test_book_without_membership_leaves_no_row(make_user, make_slot, now):
    user = make_user()
    slot = make_slot()
    with pytest.raises(NoActiveMembership):
        bookings.book(user.id, slot.id, now=now)
    assert Booking.query.count() == 0
    # the lock bump was rolled back with everything else
    assert db.session.get(TimeSlot, slot.id).lock_version == 0


def test_double_book_is_rejected(unlimited, make_slot, now):
    user = unlimited()
    slot = make_slot()
    bookings.book(user.id, slot.id, now=now)
    with pytest.raises(AlreadyBooked):
        bookings.book(user.id, slot.id, now=now)
    assert Booking.query.filter_by(user_id=user.id, timeslot_id=slot.id).count() == 1


def test_holder_of_full_slot_gets_already_booked(unlimited, make_slot, now):
    user = unlimited()
    slot = make_slot(capacity=1)
    bookings.book(user.id, slot.id, now=now)
    with pytest.raises(AlreadyBooked):
        bookings.book(user.id, slot.id, now=now)


def test_rebook_reuses_row(make_user, make_plan, make_membership, make_slot, now):
    user = make_user()
    first = make_membership(user, make_plan())
    slot = make_slot()

    booked = bookings.book(user.id, slot.id, now=now)
    bookings.cancel(booked.id, user.id, "sick", now=now)

    # membership changed between cancel and rebook
    second = make_membership(user, make_plan(credits_per_month=4), starts_at=datetime(2026, 3, 1))
    rebooked = bookings.book(user.id, slot.id, now=now)

    assert rebooked.id == booked.id
    assert rebooked.rebooked is True
    assert Booking.query.count() == 1
    row = db.session.get(Booking, booked.id)
    assert row.status == "confirmed"
    assert row.membership_id == second.id != first.id
    assert row.cancelled_at is None
    assert row.cancellation_reason is None


# ---------- cancel ----------

def test_cancel_stamps_reason_and_time(unlimited, make_slot, now):
    user = unlimited()
    booked = bookings.book(user.id, make_slot().id, now=now)

    row = bookings.cancel(booked.id, user.id, "Feeling unwell", now=now)

    assert row.status == "cancelled"
    assert row.cancelled_at == now
    assert row.cancellation_reason == "Feeling unwell"


def test_cancel_twice_is_rejected(unlimited, make_slot, now):
    user = unlimited()
    booked = bookings.book(user.id, make_slot().id, now=now)
    bookings.cancel(booked.id, user.id, now=now)
    with pytest.raises(BookingNotActive):
        bookings.cancel(booked.id, user.id, now=now)


def test_cancel_other_members_booking_is_forbidden(unlimited, make_slot, now):
    owner, other = unlimited(), unlimited()
    booked = bookings.book(owner.id, make_slot().id, now=now)
    with pytest.raises(Forbidden):
        bookings.cancel(booked.id, other.id, now=now)
    assert db.session.get(Booking, booked.id).status == "confirmed"


def test_cancel_unknown_booking(unlimited, now):
    with pytest.raises(NotFound):
        bookings.cancel(12345, unlimited().id, now=now)


def test_holder_can_cancel_after_slot_started(unlimited, make_slot, now):
    user = unlimited()
    slot = make_slot(day=now.date(), start=time(12, 30), end=time(13, 30))
    booked = bookings.book(user.id, slot.id, now=now)

    later = datetime(2026, 3, 15, 12, 45)
    with pytest.raises(SlotInPast):
        bookings.book(unlimited().id, slot.id, now=later)
    assert bookings.cancel(booked.id, user.id, now=later).status == "cancelled"


def test_single_seat_scenario(unlimited, make_slot, now):
    a, b = unlimited(), unlimited()
    slot = make_slot(capacity=1)

    booked = bookings.book(a.id, slot.id, now=now)
    assert booked.status == "confirmed"

    with pytest.raises(SlotFull):
        bookings.book(b.id, slot.id, now=now)

    bookings.cancel(booked.id, a.id, now=now)
    assert confirmed_count(slot.id) == 0

    assert bookings.book(b.id, slot.id, now=now).status == "confirmed"
    assert confirmed_count(slot.id) == 1
