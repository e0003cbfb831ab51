"""Clock abstraction used by the reconciliation phases.

All timestamps are naive UTC, matching the DateTime columns of the models.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


class FrozenClock:
    """Clock pinned to a given instant; tests move it with `advance`/`set`."""

    def __init__(self, instant: Optional[datetime] = None):
        self._instant = instant or SystemClock().now()

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._instant.date()

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, delta: timedelta) -> None:
        self._instant = self._instant + delta
