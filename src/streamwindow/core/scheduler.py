"""Frame-paced ingestion of cyclic datasets into stream buffers."""

from __future__ import annotations

import logging
import math
import threading
from typing import List, Optional, Sequence

from .cadence import FrameCadence
from .errors import InvalidConfiguration
from .models import Sample, Stream
from ..analysis.rate import RateAccumulator
from ..tools.debug import time_block

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """
    Owns the shared primary-axis cursor and appends ``batch_size`` samples per
    stream on every tick.

    All streams advance in lock-step: for each cursor position every stream
    receives one sample, in configuration order, before the cursor moves on.
    The scheduler does no timing of its own; a :class:`FrameCadence` calls
    :meth:`tick` and the scheduler re-requests the next frame afterwards.
    """

    def __init__(
        self,
        streams: Sequence[Stream],
        batch_size: int,
        accumulator: Optional[RateAccumulator] = None,
        *,
        wrap_cursor: bool = False,
    ) -> None:
        if batch_size <= 0:
            raise InvalidConfiguration(f"batch_size must be positive, got {batch_size}")
        self.streams: List[Stream] = list(streams)
        self.batch_size = int(batch_size)
        self.accumulator = accumulator or RateAccumulator()
        self._x_pos = 0
        self._cursor_period: Optional[int] = None
        if wrap_cursor and self.streams:
            self._cursor_period = math.lcm(*(len(s.dataset) for s in self.streams))
        self._cadence: Optional[FrameCadence] = None
        self._running = False
        # Serializes the re-request in _on_frame against stop().
        self._state_lock = threading.Lock()

    @property
    def x_pos(self) -> int:
        """Primary coordinate the next tick starts at."""
        return self._x_pos

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> int:
        """Append one batch to every stream; return samples appended per stream."""
        batches: List[List[Sample]] = [[] for _ in self.streams]
        x_pos = self._x_pos
        for _ in range(self.batch_size):
            for stream, batch in zip(self.streams, batches):
                batch.append(Sample(index=x_pos, values=stream.dataset.record(x_pos)))
            x_pos += 1
            if self._cursor_period is not None:
                x_pos %= self._cursor_period
        self._x_pos = x_pos

        for stream, batch in zip(self.streams, batches):
            with stream.buffer.locked():
                delta = stream.buffer.append(batch)
                stream.sink.append(delta)
            self.accumulator.add(len(delta))
        return self.batch_size

    # ---------------------------------------------------------------- cadence
    def start(self, cadence: FrameCadence) -> None:
        if self._running:
            return
        self._cadence = cadence
        self._running = True
        logger.info(
            "Ingesting %d samples/frame into %d stream(s)", self.batch_size, len(self.streams)
        )
        cadence.request(self._on_frame)

    def stop(self) -> None:
        with self._state_lock:
            if not self._running:
                return
            self._running = False
        if self._cadence is not None:
            self._cadence.cancel()
        logger.info("Ingestion stopped at x=%d", self._x_pos)

    def _on_frame(self) -> None:
        if not self._running:
            return
        with time_block("ingestion tick"):
            self.tick()
        with self._state_lock:
            if self._running and self._cadence is not None:
                self._cadence.request(self._on_frame)
