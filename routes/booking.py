from flask import Blueprint, request, jsonify, current_app, g

from models.booking import Booking
from models.time_slot import TimeSlot
from services import bookings
from services.entitlements import check_credits
from services.errors import BookingError, NotFound, ValidationError
from utils.auth_context import login_required
from utils.audit import log_event
from utils.payload import is_positive_int, json_object, optional_text

booking_bp = Blueprint("booking", __name__)


def _parse_timeslot_id(data) -> int:
    timeslot_id = data.get("timeslotId")
    if not is_positive_int(timeslot_id):
        raise ValidationError("Valid time slot is required")
    return timeslot_id


def _parse_reason(data):
    max_len = current_app.config.get("CANCELLATION_REASON_MAX_LENGTH", 255)
    return optional_text(data, "reason", max_len)


def _deny(action: str, err: BookingError, entity: str, entity_id):
    current_app.logger.info("%s user=%s %s=%s kind=%s", action, g.user.id, entity, entity_id, err.kind)
    log_event(action, user_id=g.user.id, entity=entity, entity_id=entity_id, metadata={"kind": err.kind})


# ---------- MEMBERS: book a slot (capacity + credit checked atomically) ----------
@booking_bp.post("/bookings")
@login_required
def create_booking():
    data = json_object()
    timeslot_id = _parse_timeslot_id(data)

    try:
        outcome = bookings.book(g.user.id, timeslot_id)
    except BookingError as err:
        _deny("BOOKING_DENIED", err, "time_slot", timeslot_id)
        raise

    action = "BOOKING_REBOOK" if outcome.rebooked else "BOOKING_CREATE"
    log_event(
        action,
        user_id=g.user.id,
        entity="booking",
        entity_id=outcome.id,
        metadata={"timeslot_id": timeslot_id, "membership_id": outcome.membership_id},
    )
    return jsonify(success=True, booking=outcome.to_dict()), 200 if outcome.rebooked else 201


# ---------- MEMBERS: cancel own booking ----------
@booking_bp.delete("/bookings/<int:booking_id>")
@login_required
def cancel_booking(booking_id: int):
    if not is_positive_int(booking_id):
        raise NotFound()
    data = json_object()
    reason = _parse_reason(data)

    try:
        bookings.cancel(booking_id, g.user.id, reason)
    except BookingError as err:
        _deny("BOOKING_CANCEL_DENIED", err, "booking", booking_id)
        raise

    log_event("BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking_id, metadata={"reason": reason})
    return jsonify(success=True), 200


# ---------- MEMBERS: view my bookings ----------
@booking_bp.get("/bookings/me")
@login_required
def my_bookings():
    status = request.args.get("status")  # confirmed/cancelled
    q = Booking.query.filter_by(user_id=g.user.id)
    if status:
        q = q.filter_by(status=status)

    rows = q.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    slot_ids = [b.timeslot_id for b in rows]
    slots = {s.id: s for s in TimeSlot.query.filter(TimeSlot.id.in_(slot_ids)).all()} if slot_ids else {}

    out = []
    for b in rows:
        s = slots.get(b.timeslot_id)
        out.append({
            "id": b.id,
            "status": b.status,
            "membershipId": b.membership_id,
            "createdAt": b.created_at.isoformat(),
            "cancelledAt": b.cancelled_at.isoformat() if b.cancelled_at else None,
            "cancellationReason": b.cancellation_reason,
            "slot": {
                "id": b.timeslot_id,
                "date": s.date.isoformat() if s else None,
                "startTime": s.start_time.strftime("%H:%M") if s else None,
                "endTime": s.end_time.strftime("%H:%M") if s else None,
            },
        })
    return jsonify(out), 200


# ---------- MEMBERS: remaining credits ----------
@booking_bp.get("/memberships/me/credits")
@login_required
def my_credits():
    return jsonify(check_credits(g.user.id).to_dict()), 200
