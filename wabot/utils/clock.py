"""Clock abstraction so timed sequences can run against virtual time in tests."""

import abc
import asyncio
import time


class Clock(abc.ABC):
    """Source of the current time and of sleeps."""

    @abc.abstractmethod
    def now(self) -> float:
        """Current time in epoch seconds."""
        ...

    @abc.abstractmethod
    async def sleep(self, seconds: float) -> None:
        ...


class SystemClock(Clock):
    """Wall-clock time backed by :func:`time.time` and :func:`asyncio.sleep`."""

    def now(self) -> float:
        return time.time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
