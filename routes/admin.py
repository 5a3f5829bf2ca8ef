from datetime import datetime
from flask import Blueprint, jsonify, g
from security.rbac import require_role
from utils.audit import log_event
from utils.dates import parse_date, parse_time
from models import db
from models.time_slot import TimeSlot
from services.errors import ValidationError
from services.memberships import assign_membership, build_plan
from services.schedule import serialize_slot
from utils.payload import is_positive_int, json_object, optional_text

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def _required_int(data, key):
    value = data.get(key)
    if not is_positive_int(value):
        raise ValidationError(f"{key} is required")
    return value


# ---------- ADMIN: create time slot ----------
@admin_bp.post("/timeslots")
@require_role("admin")
def create_timeslot():
    data = json_object()
    date_str = data.get("date")
    start_str = data.get("startTime")
    end_str = data.get("endTime")
    capacity = data.get("capacity")

    if not date_str or not start_str or not end_str:
        return jsonify(error="date, startTime, endTime are required"), 400

    try:
        day = parse_date(date_str)
        start = parse_time(start_str)
        end = parse_time(end_str)
    except (TypeError, ValueError):
        return jsonify(error="Invalid date/time. Use YYYY-MM-DD and HH:MM"), 400

    if end <= start:
        return jsonify(error="endTime must be after startTime"), 400
    if not is_positive_int(capacity):
        return jsonify(error="capacity must be a positive integer"), 400

    slot = TimeSlot(
        date=day,
        start_time=start,
        end_time=end,
        capacity=capacity,
        type=optional_text(data, "type", 80),
        description=optional_text(data, "description"),
    )
    db.session.add(slot)
    db.session.commit()

    log_event("SLOT_CREATE", user_id=g.user.id, entity="time_slot", entity_id=slot.id)
    return jsonify(serialize_slot(slot, 0, datetime.now())), 201


# ---------- ADMIN: cancel time slot (existing bookings are kept) ----------
@admin_bp.post("/timeslots/<int:slot_id>/cancel")
@require_role("admin")
def cancel_timeslot(slot_id: int):
    slot = db.session.get(TimeSlot, slot_id) if is_positive_int(slot_id) else None
    if not slot:
        return jsonify(error="Time slot not found"), 404

    slot.is_cancelled = True
    db.session.commit()

    log_event("SLOT_CANCEL", user_id=g.user.id, entity="time_slot", entity_id=slot_id)
    return jsonify(message="Time slot cancelled"), 200


# ---------- ADMIN: create membership plan ----------
@admin_bp.post("/plans")
@require_role("admin")
def create_plan():
    data = json_object()
    plan = build_plan(data)
    db.session.add(plan)
    db.session.commit()

    log_event("PLAN_CREATE", user_id=g.user.id, entity="membership_plan", entity_id=plan.id)
    return jsonify(plan.to_dict()), 201


# ---------- ADMIN: assign membership to a member ----------
@admin_bp.post("/memberships")
@require_role("admin")
def create_membership():
    data = json_object()
    user_id = _required_int(data, "userId")
    plan_id = _required_int(data, "planId")

    starts_at = None
    if data.get("startsAt"):
        try:
            starts_at = datetime.fromisoformat(data["startsAt"])
        except (TypeError, ValueError):
            raise ValidationError("Invalid startsAt. Use ISO e.g. 2026-01-20T00:00:00") from None

    membership = assign_membership(user_id, plan_id, starts_at)

    log_event(
        "MEMBERSHIP_ASSIGN",
        user_id=g.user.id,
        entity="membership",
        entity_id=membership.id,
        metadata={"member_id": user_id, "plan_id": plan_id},
    )
    return jsonify(membership.to_dict()), 201
