from flask import Blueprint, jsonify

from models.membership_plan import MembershipPlan
from utils.auth_context import login_required

plans_bp = Blueprint("plans", __name__)


@plans_bp.get("/plans")
@login_required
def list_plans():
    plans = (
        MembershipPlan.query
        .filter_by(is_active=True)
        .order_by(MembershipPlan.price_cents.asc(), MembershipPlan.id.asc())
        .all()
    )
    return jsonify([p.to_dict() for p in plans]), 200
