"""Synthetic waveform source used to seed stream datasets."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import numpy as np

from ..core.errors import GenerationError

logger = logging.getLogger(__name__)


class SampleGenerator(Protocol):
    """Produces ``count`` ordered ``(x, y)`` points as an ``(count, 2)`` array."""

    async def generate(self, count: int) -> np.ndarray:  # pragma: no cover - protocol
        ...


class ProgressiveTraceGenerator:
    """
    Random-walk trace with progressive X values.

    ``x`` runs ``0 .. count-1`` and every ``y`` differs from its predecessor by
    at most ``step``, so adjacent points never jump further than one step.
    """

    def __init__(self, step: float = 1.0, seed: Optional[int] = None) -> None:
        if step <= 0:
            raise GenerationError("step must be positive")
        self.step = float(step)
        self._rng = np.random.default_rng(seed)

    def generate_now(self, count: int) -> np.ndarray:
        """Synchronous variant of :meth:`generate`."""
        if count <= 0:
            raise GenerationError(f"count must be positive, got {count}")
        increments = self._rng.uniform(-self.step, self.step, size=count)
        increments[0] = 0.0
        x = np.arange(count, dtype=np.float64)
        y = np.cumsum(increments)
        return np.column_stack((x, y))

    async def generate(self, count: int) -> np.ndarray:
        # Yield once so concurrent builds interleave like real async sources.
        await asyncio.sleep(0)
        points = self.generate_now(count)
        logger.debug("Generated %d trace points", count)
        return points
