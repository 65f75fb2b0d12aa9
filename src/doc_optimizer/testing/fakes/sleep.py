"""Testing fakes – FakeSleep."""
from __future__ import annotations

from doc_optimizer.kernel.time import FrozenClock


class FakeSleep:
    """Awaitable stand-in for ``asyncio.sleep`` that records every delay.

    When built with a :class:`FrozenClock`, each call advances it by the
    requested delay so time-dependent state moves as if the sleep happened.

    Usage::

        clock = FakeClock()
        sleep = FakeSleep(clock)
        executor = ResilientExecutor("svc", clock=clock, sleep=sleep)
        ...
        assert sleep.delays == [1.0, 2.0]
    """

    def __init__(self, clock: FrozenClock | None = None) -> None:
        self._clock = clock
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds=seconds)

    @property
    def call_count(self) -> int:
        return len(self.delays)


__all__ = ["FakeSleep"]
