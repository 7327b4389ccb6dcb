"""Periodic trimming of stream buffers to a fixed retention window."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .cadence import IntervalCadence
from .errors import InvalidConfiguration
from .models import Stream
from ..tools.debug import time_block

logger = logging.getLogger(__name__)


class RetentionTrimmer:
    """
    Discards the oldest samples of every stream above ``retention_window``.

    Runs on its own interval, independent of the ingestion cadence. A trimmed
    stream's sink is cleared and repopulated with exactly the retained
    suffix, so points dropped from the buffer also disappear downstream.
    """

    def __init__(self, streams: Sequence[Stream], retention_window: int) -> None:
        if retention_window <= 0:
            raise InvalidConfiguration(
                f"retention_window must be positive, got {retention_window}"
            )
        self.streams: List[Stream] = list(streams)
        self.retention_window = int(retention_window)
        self._cadence: Optional[IntervalCadence] = None

    def trim(self, retention_window: Optional[int] = None) -> Dict[str, int]:
        """Trim every stream; return how many samples each one dropped."""
        window = self.retention_window if retention_window is None else int(retention_window)
        if window <= 0:
            raise InvalidConfiguration(f"retention_window must be positive, got {window}")

        removed: Dict[str, int] = {}
        with time_block("retention trim"):
            for stream in self.streams:
                with stream.buffer.locked():
                    before = len(stream.buffer)
                    retained = stream.buffer.trim(window)
                    if retained is None:
                        continue
                    stream.sink.replace_all(retained)
                removed[stream.name] = before - len(retained)
        dropped = sum(removed.values())
        if dropped:
            logger.debug("Trimmed %d sample(s) across %d stream(s)", dropped, len(removed))
        return removed

    def start(self, cadence: IntervalCadence) -> None:
        self.stop()
        self._cadence = cadence
        cadence.start(self.trim)

    def stop(self) -> None:
        if self._cadence is not None:
            self._cadence.stop()
            self._cadence = None
