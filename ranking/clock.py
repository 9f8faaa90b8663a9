"""
Time sources for the ranking engine.

Every component that needs "now" takes a clock instead of reading the wall
clock directly, so scoring can be replayed with a fixed instant.
"""
from datetime import datetime, timezone


class Clock:
    """Source of the current UTC time"""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock pinned to one instant"""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
