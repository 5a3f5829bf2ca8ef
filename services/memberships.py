"""
Catalogue and membership assignment used by admin tooling and the CLI.
Purchase/payment flows live elsewhere; this only records the outcome.
"""
from datetime import datetime

from models import db
from models.membership import Membership
from models.membership_plan import MembershipPlan, PLAN_PUNCH_CARD, PLAN_SUBSCRIPTION, PLAN_TYPES
from models.user import User
from services.errors import NotFound, ValidationError
from utils.dates import add_months
from utils.payload import is_positive_int, optional_text

# Catalogue inserted by `flask seed-plans`
DEFAULT_PLANS = [
    dict(name="Trial", type=PLAN_SUBSCRIPTION, price_cents=0, credits_per_month=None,
         validity_months=1, minimum_commitment_months=1, auto_renew=False,
         description="Free trial membership for new members. Unlimited sessions for 1 month."),
    dict(name="2 Credits Monthly", type=PLAN_SUBSCRIPTION, price_cents=2500, credits_per_month=2,
         minimum_commitment_months=3, auto_renew=True,
         description="Monthly subscription with 2 sauna sessions per month."),
    dict(name="4 Credits Monthly", type=PLAN_SUBSCRIPTION, price_cents=4000, credits_per_month=4,
         minimum_commitment_months=2, auto_renew=True,
         description="Monthly subscription with 4 sauna sessions per month."),
    dict(name="8 Credits Monthly", type=PLAN_SUBSCRIPTION, price_cents=6400, credits_per_month=8,
         minimum_commitment_months=1, auto_renew=True,
         description="Monthly subscription with 8 sauna sessions per month."),
    dict(name="Unlimited Monthly", type=PLAN_SUBSCRIPTION, price_cents=8000, credits_per_month=None,
         minimum_commitment_months=1, auto_renew=True,
         description="Monthly subscription with unlimited sauna sessions."),
    dict(name="Punch Card 5", type=PLAN_PUNCH_CARD, price_cents=7500, total_credits=5,
         validity_months=3, auto_renew=False,
         description="Punch card with 5 sessions. Valid for 3 months."),
    dict(name="Punch Card 10", type=PLAN_PUNCH_CARD, price_cents=14000, total_credits=10,
         validity_months=6, auto_renew=False,
         description="Punch card with 10 sessions. Valid for 6 months."),
]


def _optional_positive_int(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    if not is_positive_int(value):
        raise ValidationError(f"{key} must be a positive integer")
    return value


def build_plan(data: dict) -> MembershipPlan:
    """Validate plan-shape rules and return an unsaved plan."""
    name = (data.get("name") or "").strip() if isinstance(data.get("name"), str) else ""
    plan_type = data.get("type")
    if not name:
        raise ValidationError("name is required")
    if plan_type not in PLAN_TYPES:
        raise ValidationError("type must be subscription or punch_card")

    credits_per_month = _optional_positive_int(data, "creditsPerMonth")
    total_credits = _optional_positive_int(data, "totalCredits")

    if plan_type == PLAN_SUBSCRIPTION and total_credits is not None:
        raise ValidationError("subscription plans cannot have totalCredits")
    if plan_type == PLAN_PUNCH_CARD:
        if total_credits is None:
            raise ValidationError("punch_card plans require totalCredits")
        if credits_per_month is not None:
            raise ValidationError("punch_card plans cannot have creditsPerMonth")

    price_cents = data.get("priceCents", 0)
    if not (is_positive_int(price_cents) or (type(price_cents) is int and price_cents == 0)):
        raise ValidationError("priceCents must be a non-negative integer")

    return MembershipPlan(
        name=name,
        description=optional_text(data, "description"),
        type=plan_type,
        price_cents=price_cents,
        credits_per_month=credits_per_month,
        total_credits=total_credits,
        validity_months=_optional_positive_int(data, "validityMonths"),
        minimum_commitment_months=_optional_positive_int(data, "minimumCommitmentMonths"),
        auto_renew=bool(data.get("autoRenew", False)),
        is_active=bool(data.get("isActive", True)),
    )


def seed_plans() -> int:
    """Insert any missing default plans (matched by name). Returns how many were added."""
    existing = {p.name for p in MembershipPlan.query.all()}
    added = 0
    for fields in DEFAULT_PLANS:
        if fields["name"] in existing:
            continue
        db.session.add(MembershipPlan(**fields))
        added += 1
    db.session.commit()
    return added


def assign_membership(user_id: int, plan_id: int, starts_at: datetime = None) -> Membership:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    plan = db.session.get(MembershipPlan, plan_id)
    if plan is None or not plan.is_active:
        raise NotFound("Membership plan not found")

    starts_at = starts_at or datetime.now()
    expires_at = add_months(starts_at, plan.validity_months) if plan.validity_months else None

    membership = Membership(
        user_id=user.id,
        plan_id=plan.id,
        status="active",
        starts_at=starts_at,
        expires_at=expires_at,
    )
    db.session.add(membership)
    db.session.commit()
    return membership
