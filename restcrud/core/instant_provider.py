from datetime import datetime, timezone
from typing import Callable


class InstantProvider:
    """Source of the current time for CRUD services.

    Services never read the system clock directly so tests can control time.
    """

    def __init__(self, clock: Callable[[], datetime]):
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    @classmethod
    def clock_based(cls, clock: Callable[[], datetime]) -> "InstantProvider":
        return cls(clock)

    @classmethod
    def utc(cls) -> "InstantProvider":
        return cls(lambda: datetime.now(timezone.utc))
