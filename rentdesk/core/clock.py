"""
Injectable clock.

Services never call ``datetime.now()`` or ``date.today()`` directly; they
receive a Clock so that late-fee and generation logic can be tested with
fixed dates.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from .config import settings


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Current local time as a naive datetime."""
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall clock in the configured business timezone."""

    def __init__(self, timezone_name: str = None):
        self._tz = ZoneInfo(timezone_name or settings.APP_TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)


class FixedClock(Clock):
    """
    Clock with controlled time for tests.

    ``now()`` returns the same value until ``set_time()`` or ``advance()``
    is called.
    """

    def __init__(self, fixed_time: datetime = None):
        self._fixed_time = fixed_time or datetime(2024, 1, 1, 12, 0, 0)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time

    def advance(self, days: int = 0, seconds: int = 0) -> None:
        self._fixed_time = self._fixed_time + timedelta(days=days, seconds=seconds)


system_clock = SystemClock()
