"""
Entitlement evaluation: may this member claim one more session right now,
and which membership pays for it?

Credit usage is never stored. It is recomputed from the booking ledger on
every evaluation (confirmed bookings charged to the membership), so
cancelling a booking gives the credit back without any bookkeeping. The
price is one COUNT query per attempt; a reserved-credit ledger would be the
way out if that ever matters.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Type

from sqlalchemy import or_

from models.booking import Booking, BOOKING_CONFIRMED
from models.membership import Membership
from models.membership_plan import PLAN_PUNCH_CARD, PLAN_SUBSCRIPTION
from services.errors import (
    BookingError,
    InvalidPlanConfiguration,
    MonthlyCreditsExhausted,
    NoActiveMembership,
    PunchCardExhausted,
)
from utils.dates import month_bounds


@dataclass
class CreditCheck:
    allowed: bool
    membership_id: Optional[int]
    reason: Optional[Type[BookingError]] = None
    used: int = 0
    limit: Optional[int] = None  # None = unlimited (or nothing to count against)

    def raise_for_denial(self):
        if not self.allowed:
            raise self.reason()

    def to_dict(self):
        return {
            "allowed": self.allowed,
            "membershipId": self.membership_id,
            "reason": self.reason().message if self.reason else None,
            "used": self.used,
            "limit": self.limit,
        }


def eligible_membership_query(user_id: int, now: datetime, lock: bool = False):
    """
    Memberships that are active and inside their validity window at `now`,
    newest first. No precedence between plan types: newest wins.

    With `lock`, the chosen row is held FOR UPDATE until the transaction
    ends, so two bookings by the same member on different slots count and
    spend its credits one after the other.
    """
    q = (
        Membership.query
        .filter(
            Membership.user_id == user_id,
            Membership.status == "active",
            Membership.starts_at <= now,
            or_(Membership.expires_at.is_(None), Membership.expires_at >= now),
        )
        .order_by(Membership.created_at.desc(), Membership.id.desc())
    )
    if lock:
        q = q.populate_existing().with_for_update(of=Membership)
    return q


def find_eligible_membership(user_id: int, now: datetime, lock: bool = False) -> Optional[Membership]:
    return eligible_membership_query(user_id, now, lock).first()


def count_confirmed_for_membership(membership_id: int, start: datetime = None, end: datetime = None) -> int:
    q = Booking.query.filter(
        Booking.membership_id == membership_id,
        Booking.status == BOOKING_CONFIRMED,
    )
    if start is not None:
        q = q.filter(Booking.created_at >= start)
    if end is not None:
        q = q.filter(Booking.created_at < end)
    return q.count()


def check_credits(user_id: int, now: datetime = None, lock: bool = False) -> CreditCheck:
    now = now or datetime.now()

    membership = find_eligible_membership(user_id, now, lock=lock)
    if membership is None:
        return CreditCheck(allowed=False, membership_id=None, reason=NoActiveMembership)

    plan = membership.plan

    if plan.type == PLAN_SUBSCRIPTION and plan.credits_per_month is None:
        return CreditCheck(allowed=True, membership_id=membership.id)

    if plan.type == PLAN_SUBSCRIPTION:
        start, end = month_bounds(now)
        used = count_confirmed_for_membership(membership.id, start, end)
        if used >= plan.credits_per_month:
            return CreditCheck(False, membership.id, MonthlyCreditsExhausted, used, plan.credits_per_month)
        return CreditCheck(True, membership.id, None, used, plan.credits_per_month)

    if plan.type == PLAN_PUNCH_CARD and plan.total_credits is not None:
        # Punch cards are not windowed: every confirmed booking ever counts
        used = count_confirmed_for_membership(membership.id)
        if used >= plan.total_credits:
            return CreditCheck(False, membership.id, PunchCardExhausted, used, plan.total_credits)
        return CreditCheck(True, membership.id, None, used, plan.total_credits)

    return CreditCheck(allowed=False, membership_id=membership.id, reason=InvalidPlanConfiguration)
