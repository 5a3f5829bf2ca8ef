from datetime import date

from flask import Blueprint, request, jsonify, current_app, g

from services.errors import ValidationError
from services.schedule import project_schedule
from utils.auth_context import login_required
from utils.dates import day_range, parse_date

schedule_bp = Blueprint("schedule", __name__)


def _date_arg(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {name} date. Use YYYY-MM-DD") from None


@schedule_bp.get("/schedule")
@login_required
def get_schedule():
    start = _date_arg("from") or date.today()
    end = _date_arg("to")
    if end is None:
        _, end = day_range(start, current_app.config.get("SCHEDULE_DEFAULT_DAYS", 14))
    if end < start:
        raise ValidationError("to must not be before from")

    return jsonify(project_schedule(g.user.id, start, end)), 200
