"""Clock abstraction used for cart expiry comparisons."""
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current UTC time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock:
    """
    Manually driven clock for tests.

    Time only moves when ``advance`` or ``set_time`` is called.
    """

    def __init__(self, initial: datetime | None = None):
        self._current = initial or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current

    def set_time(self, value: datetime) -> None:
        self._current = value

    def advance(self, delta: timedelta | None = None, **kwargs) -> datetime:
        """Move time forward by ``delta`` or by timedelta keyword args."""
        self._current += delta if delta is not None else timedelta(**kwargs)
        return self._current

