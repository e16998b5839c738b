"""Injectable clock so services never read the wall clock directly."""

from abc import ABC, abstractmethod
from datetime import datetime, date, UTC


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time (timezone-aware, UTC)."""
        ...

    def today(self) -> date:
        """Get the current UTC date."""
        return self.now().date()


class SystemClock(Clock):
    """Clock returning actual system time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(Clock):
    """Clock frozen at a given instant, for tests and replays."""

    def __init__(self, fixed: datetime):
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed

    def advance_to(self, fixed: datetime) -> None:
        """Move the clock to a new instant."""
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed
