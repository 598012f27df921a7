# common/timezone_utils.py
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta
from django.utils import timezone


def local_today() -> date:
    """Return today's calendar date in the project timezone."""
    return timezone.localdate()


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end``; negative when ``end`` is earlier."""
    return (end - start).days


def age_on(birth_date: date | None, as_of: date | None = None) -> int | None:
    if birth_date is None:
        return None
    as_of = as_of or local_today()
    return relativedelta(as_of, birth_date).years


def month_bounds(as_of: date) -> tuple[date, date]:
    """First and last day of the month containing ``as_of``."""
    first = as_of.replace(day=1)
    return first, first + relativedelta(months=1, days=-1)
