"""The three periodic tasks of one windowing run, bundled for start/stop."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional

from .cadence import FrameCadence, IntervalCadence
from .models import Sample, Stream
from .retention import RetentionTrimmer
from .scheduler import IngestionScheduler
from ..analysis.rate import RateMeter

__all__ = ["Pipeline"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Pipeline:
    """Scheduler, trimmer and rate meter operating over the same streams."""

    streams: List[Stream]
    scheduler: IngestionScheduler
    trimmer: RetentionTrimmer
    rate_meter: RateMeter

    _rate_cadence: Optional[IntervalCadence] = field(init=False, default=None, repr=False)
    _reset_cadence: Optional[IntervalCadence] = field(init=False, default=None, repr=False)

    def start(
        self,
        frames: FrameCadence,
        trim: IntervalCadence,
        rate: IntervalCadence,
        reset: Optional[IntervalCadence] = None,
    ) -> None:
        """
        Start all periodic tasks.

        With ``reset`` omitted the rate cadence both reads and, once the reset
        interval has passed, resets the rate window; otherwise ``reset`` drives
        the reset on its own timer.
        """
        if self.running:
            return
        self.rate_meter.reset()
        self.scheduler.start(frames)
        self.trimmer.start(trim)
        if reset is None:
            rate.start(self.rate_meter.update)
        else:
            rate.start(self.rate_meter.read)
            reset.start(self.rate_meter.reset)
            self._reset_cadence = reset
        self._rate_cadence = rate
        logger.info("Pipeline started with %d stream(s)", len(self.streams))

    def stop(self) -> None:
        """Cancel every periodic task. Buffers keep their contents."""
        self.scheduler.stop()
        self.trimmer.stop()
        for cadence in (self._rate_cadence, self._reset_cadence):
            if cadence is not None:
                cadence.stop()
        self._rate_cadence = None
        self._reset_cadence = None
        logger.info("Pipeline stopped")

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def stream(self, name: str) -> Stream:
        for stream in self.streams:
            if stream.name == name:
                return stream
        raise KeyError(name)

    def stream_names(self) -> List[str]:
        return [stream.name for stream in self.streams]

    def snapshot(self) -> Dict[str, List[Sample]]:
        """Return a copy of every stream's buffered samples keyed by name."""
        return {stream.name: stream.buffer.snapshot() for stream in self.streams}

    def buffer_lengths(self) -> Dict[str, int]:
        return {stream.name: len(stream.buffer) for stream in self.streams}
