"""
Group movie night schedules.

A group either meets every week on a fixed day and time, or once on a
specific date. Days follow the Sunday=0 ... Saturday=6 convention.
"""

import re
from datetime import datetime, timedelta

from errors import PreconditionError
from utils import RECURRING, ONE_OFF, SCHEDULE_TYPES

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time(value):
    """Split an HH:MM string into (hours, minutes)."""
    match = TIME_PATTERN.match(value or "")
    if not match:
        raise PreconditionError(f"Time must be HH:MM, got {value!r}")
    return int(match.group(1)), int(match.group(2))


def validate_schedule(schedule_type, schedule_time, schedule_day=None, schedule_date=None):
    if schedule_type not in SCHEDULE_TYPES:
        raise PreconditionError(f"Schedule type must be one of {', '.join(SCHEDULE_TYPES)}")
    parse_time(schedule_time)

    if schedule_type == RECURRING:
        if not isinstance(schedule_day, int) or not 0 <= schedule_day <= 6:
            raise PreconditionError("A weekly schedule needs a day between 0 (Sunday) and 6 (Saturday)")
    elif not isinstance(schedule_date, datetime):
        raise PreconditionError("A one-off movie night needs a date")


def sunday_based_weekday(moment):
    return (moment.weekday() + 1) % 7


def next_movie_night(group, now):
    """
    When the group next meets.

    Args:
        group: Group record
        now: Current datetime; the result shares its timezone

    Returns:
        Datetime of the next movie night. For a one-off night this is the
        scheduled date even once it has passed.
    """
    hours, minutes = parse_time(group.schedule_time)

    if group.schedule_type == ONE_OFF:
        return group.schedule_date.replace(hour=hours, minute=minutes, second=0, microsecond=0)

    days_ahead = (group.schedule_day - sunday_based_weekday(now)) % 7
    candidate = (now + timedelta(days=days_ahead)).replace(
        hour=hours, minute=minutes, second=0, microsecond=0
    )
    # Already happened today
    if candidate < now:
        candidate += timedelta(days=7)
    return candidate
