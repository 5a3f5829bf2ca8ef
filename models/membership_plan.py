from datetime import datetime
from models.db import db

PLAN_SUBSCRIPTION = "subscription"
PLAN_PUNCH_CARD = "punch_card"
PLAN_TYPES = (PLAN_SUBSCRIPTION, PLAN_PUNCH_CARD)


class MembershipPlan(db.Model):
    __tablename__ = "membership_plans"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)

    type = db.Column(db.String(20), nullable=False)  # subscription, punch_card
    price_cents = db.Column(db.Integer, nullable=False, default=0)

    # subscription only; NULL means unlimited
    credits_per_month = db.Column(db.Integer, nullable=True)
    # punch_card only
    total_credits = db.Column(db.Integer, nullable=True)

    validity_months = db.Column(db.Integer, nullable=True)
    minimum_commitment_months = db.Column(db.Integer, nullable=True)
    auto_renew = db.Column(db.Boolean, default=False, nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        db.CheckConstraint("type IN ('subscription', 'punch_card')", name="ck_membership_plan_type"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "priceCents": self.price_cents,
            "creditsPerMonth": self.credits_per_month,
            "totalCredits": self.total_credits,
            "validityMonths": self.validity_months,
            "minimumCommitmentMonths": self.minimum_commitment_months,
            "autoRenew": self.auto_renew,
            "isActive": self.is_active,
        }
