from datetime import date, datetime, time, timedelta
import calendar


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """
    Calendar month containing `now`: first-of-month 00:00 (inclusive) to
    first-of-next-month 00:00 (exclusive).
    """
    start = datetime(now.year, now.month, 1)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1)
    else:
        end = datetime(now.year, now.month + 1, 1)
    return start, end


def add_months(dt: datetime, months: int) -> datetime:
    # Clamp to the last day of the target month (Jan 31 + 1 -> Feb 28/29)
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def slot_start(slot) -> datetime:
    """Absolute start of a slot: its calendar day at its wall-clock start time."""
    return datetime.combine(slot.date, slot.start_time)


def parse_date(value: str) -> date:
    # Expect "YYYY-MM-DD"
    return date.fromisoformat(value)


def parse_time(value: str) -> time:
    # Expect "HH:MM" or "HH:MM:SS"
    return time.fromisoformat(value)


def day_range(start: date, days: int) -> tuple[date, date]:
    return start, start + timedelta(days=days)
