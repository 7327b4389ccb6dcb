from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LABEL_TEMPLATE = "{title} ({rounded} data points / s)"

Clock = Callable[[], float]
RatePublisher = Callable[[float], None]


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


def samples_per_second(sample_count: int, elapsed_ms: float) -> Optional[float]:
    """Return ``1000 * sample_count / elapsed_ms`` or ``None`` when undefined."""
    if sample_count <= 0 or elapsed_ms <= 0:
        return None
    return 1000.0 * sample_count / elapsed_ms


class RateAccumulator:
    """
    Process-wide sample counter paired with the start of its time window.

    The scheduler calls :meth:`add` on every append; the meter reads and
    resets. One lock covers both fields so a reset never tears a read.
    """

    def __init__(self, clock: Clock = monotonic_ms) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._window_start = clock()
        self._sample_count = 0

    def add(self, count: int = 1) -> None:
        with self._lock:
            self._sample_count += count

    def reset(self) -> None:
        with self._lock:
            self._window_start = self._clock()
            self._sample_count = 0

    def read(self) -> tuple[int, float]:
        """Return ``(sample_count, elapsed_ms)`` for the current window."""
        with self._lock:
            return self._sample_count, self._clock() - self._window_start

    @property
    def sample_count(self) -> int:
        with self._lock:
            return self._sample_count

    @property
    def window_start(self) -> float:
        with self._lock:
            return self._window_start


@dataclass
class RateReading:
    """Container for one published rate value."""

    rate: float
    sample_count: int
    elapsed_ms: float


class RateMeter:
    """
    Derive samples/second from a :class:`RateAccumulator`.

    Notes
    -----
    - :meth:`read` is the fast cadence: it publishes a rate whenever the
      window holds samples and time has passed.
    - :meth:`reset` is the slow cadence: it restarts the window regardless of
      when the last read happened, so a suspended process cannot drag the
      figure down for long.
    - :meth:`update` does both from a single timer, resetting once
      ``reset_interval_ms`` has passed since the previous reset.
    """

    def __init__(
        self,
        accumulator: RateAccumulator,
        *,
        publish: Optional[RatePublisher] = None,
        reset_interval_ms: float = 5000.0,
        clock: Clock = monotonic_ms,
    ) -> None:
        self.accumulator = accumulator
        self.publish = publish
        self.reset_interval_ms = float(reset_interval_ms)
        self._clock = clock
        self._last_reset = clock()
        self._last_reading: Optional[RateReading] = None

    def read(self) -> Optional[RateReading]:
        count, elapsed = self.accumulator.read()
        rate = samples_per_second(count, elapsed)
        if rate is None:
            return None
        reading = RateReading(rate=rate, sample_count=count, elapsed_ms=elapsed)
        self._last_reading = reading
        logger.debug("Ingestion rate %.1f samples/s (%d in %.0f ms)", rate, count, elapsed)
        if self.publish is not None:
            self.publish(rate)
        return reading

    def reset(self) -> None:
        self.accumulator.reset()
        self._last_reset = self._clock()

    def update(self) -> Optional[RateReading]:
        """Single-timer variant: read, then reset if the reset interval elapsed."""
        reading = self.read()
        if self._clock() - self._last_reset >= self.reset_interval_ms:
            self.reset()
        return reading

    @property
    def last_reading(self) -> Optional[RateReading]:
        return self._last_reading

    @staticmethod
    def format_label(rate: float, title: str = "", template: str = DEFAULT_LABEL_TEMPLATE) -> str:
        """Fill ``template`` with ``title``, the raw ``rate`` and ``rounded``.

        ``rounded`` rounds halves up (1234.5 -> 1235), not to even.
        """
        return template.format(title=title, rate=rate, rounded=math.floor(rate + 0.5))
