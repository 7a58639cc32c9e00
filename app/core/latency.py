"""Simulated processing latency.

Every "AI" step of the service is a fixed delay followed by canned content.
Services await a Latency object instead of sleeping directly so tests can
swap in ``NoLatency`` (or a failing stand-in) without patching asyncio.
"""

import asyncio
import logging
from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class Latency(ABC):
    """Awaitable delay keyed by step name."""

    @abstractmethod
    async def wait(self, step: str) -> None: ...


class SimulatedLatency(Latency):
    def __init__(self, delays: Mapping[str, float], default: float = 0.0):
        self.delays = dict(delays)
        self.default = default

    def seconds_for(self, step: str) -> float:
        return max(0.0, self.delays.get(step, self.default))

    async def wait(self, step: str) -> None:
        seconds = self.seconds_for(step)
        logger.debug("Simulating %.2fs of latency for step '%s'", seconds, step)
        await asyncio.sleep(seconds)


class NoLatency(Latency):
    async def wait(self, step: str) -> None:
        # Still yield to the loop so concurrent callers interleave as they would with real delays
        await asyncio.sleep(0)
