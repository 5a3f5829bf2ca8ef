from datetime import datetime
from models.db import db

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    timeslot_id = db.Column(db.Integer, db.ForeignKey("time_slots.id"), nullable=False, index=True)
    membership_id = db.Column(db.Integer, db.ForeignKey("memberships.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=BOOKING_CONFIRMED)
    # status values: confirmed, cancelled

    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancellation_reason = db.Column(db.String(255), nullable=True)

    __table_args__ = (
        # One row per member per slot, ever; rebooking flips this row back
        db.UniqueConstraint("user_id", "timeslot_id", name="uq_booking_user_timeslot"),
        db.CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_booking_status"),
    )
