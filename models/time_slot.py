from datetime import datetime
from models.db import db

class TimeSlot(db.Model):
    __tablename__ = "time_slots"

    id = db.Column(db.Integer, primary_key=True)

    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    capacity = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(80), nullable=True)  # e.g. "Women only"
    description = db.Column(db.Text, nullable=True)
    is_cancelled = db.Column(db.Boolean, default=False, nullable=False)

    # Bumped by every booking write; the UPDATE doubles as the slot's write lock
    lock_version = db.Column(db.Integer, default=0, server_default="0", nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        db.CheckConstraint("capacity > 0", name="ck_time_slot_capacity_positive"),
    )
