"""
Injectable time and id sources for the workflow and recurrence engines.

All calendar arithmetic in the core runs on local wall-clock time. ``Clock``
converts between aware instants and local wall time for one timezone:

- with an explicit ``tzinfo`` (typically a ``zoneinfo.ZoneInfo``), local time
  follows that zone's DST rules;
- with ``tz=None``, local time follows the host system's zone, resolved per
  instant through ``datetime.astimezone()`` so DST changes are honoured.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional


IdFactory = Callable[[], str]


def new_id() -> str:
    """Generate a unique record id."""
    return str(uuid.uuid4())


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Clock:
    """System clock bound to a local timezone."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def now(self) -> datetime:
        """Current instant as an aware datetime in local time."""
        return self.to_local(datetime.now(timezone.utc))

    def to_local(self, value: datetime) -> datetime:
        """Convert an instant to an aware local datetime."""
        value = ensure_aware(value)
        if self.tz is None:
            return value.astimezone()
        return value.astimezone(self.tz)

    def from_wall(self, wall: datetime) -> datetime:
        """Attach the local zone to a naive wall-clock datetime."""
        if self.tz is None:
            return wall.astimezone()
        return wall.replace(tzinfo=self.tz)

    def local_date(self, value: datetime):
        return self.to_local(value).date()


class FixedClock(Clock):
    """Clock frozen at one instant, for deterministic tests and replays."""

    def __init__(self, instant: datetime, tz: Optional[tzinfo] = None):
        super().__init__(tz)
        self.instant = ensure_aware(instant)

    def now(self) -> datetime:
        return self.to_local(self.instant)

    def advance(self, **delta) -> None:
        """Move the frozen instant forward (absolute time, not wall time)."""
        self.instant = self.instant + timedelta(**delta)
