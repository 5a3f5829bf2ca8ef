from datetime import datetime
from models.db import db


class Membership(db.Model):
    __tablename__ = "memberships"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    plan_id = db.Column(db.Integer, db.ForeignKey("membership_plans.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default="active")
    # status values: active, expired, payment_pending, suspended, cancelled

    starts_at = db.Column(db.DateTime, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=True)  # NULL = never expires
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False, index=True)

    user = db.relationship("User")
    plan = db.relationship("MembershipPlan", lazy="joined", innerjoin=True)

    def to_dict(self):
        return {
            "id": self.id,
            "planId": self.plan_id,
            "planName": self.plan.name if self.plan else None,
            "status": self.status,
            "startsAt": self.starts_at.isoformat(),
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }
