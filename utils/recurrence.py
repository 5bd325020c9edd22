"""
Recurrence rules for suggestions.

Pure date arithmetic on local wall-clock time: adding a calendar day keeps
the time of day even when the UTC offset changes overnight. Weekday indices
follow the stored convention 0=Sunday .. 6=Saturday.
"""

import calendar
from datetime import datetime, time, timedelta
from typing import Optional

from models.errors import MalformedSuggestionError
from models.records import FrequencyDetails, Suggestion
from models.status import Frequency
from utils.clock import Clock

DAYS_PER_WEEK = 7


def weekday_index(value: datetime) -> int:
    """Weekday with Sunday as 0 (``datetime.weekday`` has Monday as 0)."""
    return (value.weekday() + 1) % DAYS_PER_WEEK


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(wall: datetime, months: int, day_of_month: Optional[int] = None) -> datetime:
    """
    Shift a naive wall-clock datetime by ``months`` calendar months.

    The day is ``day_of_month`` (or the current day) clamped to the target
    month's length, so the 31st becomes Feb 28/29 or the 30th as needed.
    """
    years, month_index = divmod(wall.month - 1 + months, 12)
    year = wall.year + years
    month = month_index + 1
    day = min(day_of_month or wall.day, days_in_month(year, month))
    return wall.replace(year=year, month=month, day=day)


def validate_schedule(suggestion: Suggestion) -> Frequency:
    """
    Check a suggestion's recurrence settings and return its frequency.

    Raises:
        MalformedSuggestionError: Unknown frequency, weekly days outside 0-6,
            or a monthly day outside 1-31
    """
    try:
        frequency = Frequency(suggestion.frequency)
    except ValueError as e:
        raise MalformedSuggestionError(
            f"unknown frequency {suggestion.frequency!r}", suggestion_id=suggestion.id
        ) from e

    details = suggestion.frequency_details
    if details is None:
        return frequency

    if frequency == Frequency.WEEKLY and details.days_of_week:
        invalid = [
            d for d in details.days_of_week
            if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6
        ]
        if invalid:
            raise MalformedSuggestionError(
                f"days_of_week entries out of range 0-6: {invalid}",
                suggestion_id=suggestion.id,
            )

    if frequency == Frequency.MONTHLY and details.day_of_month is not None:
        if not 1 <= details.day_of_month <= 31:
            raise MalformedSuggestionError(
                f"day_of_month out of range 1-31: {details.day_of_month}",
                suggestion_id=suggestion.id,
            )

    return frequency


def compute_next_due_date(
    frequency: Frequency,
    details: Optional[FrequencyDetails],
    now: datetime,
    clock: Clock,
) -> datetime:
    """
    Next due date after a completion or skip at ``now``.

    Once has no next occurrence; ``now`` is returned unchanged.
    """
    frequency = Frequency(frequency)
    if frequency == Frequency.ONCE:
        return now

    wall = clock.to_local(now).replace(tzinfo=None)

    if frequency == Frequency.DAILY:
        next_wall = wall + timedelta(days=1)

    elif frequency == Frequency.WEEKLY:
        days = set(details.days_of_week) if details and details.days_of_week else set()
        next_wall = wall + timedelta(days=DAYS_PER_WEEK)
        for offset in range(1, DAYS_PER_WEEK + 1):
            candidate = wall + timedelta(days=offset)
            if weekday_index(candidate) in days:
                next_wall = candidate
                break

    else:
        day_of_month = details.day_of_month if details else None
        next_wall = add_months(wall, 1, day_of_month)

    return clock.from_wall(next_wall)


def end_of_today(clock: Clock) -> datetime:
    """Today at 23:59:59.999999 local time."""
    today = clock.now().date()
    return clock.from_wall(datetime.combine(today, time.max))


def is_due_today(suggestion: Suggestion, clock: Optional[Clock] = None) -> bool:
    """Active and due no later than the end of the current local day."""
    if not suggestion.is_active:
        return False
    return suggestion.next_due_date <= end_of_today(clock or Clock())
