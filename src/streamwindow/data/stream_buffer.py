"""Per-stream live buffer with append and trim-to-last-N."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
import threading
from typing import Deque, List, Optional

from ..core.errors import InvalidConfiguration
from ..core.models import Sample


class StreamBuffer:
    """
    Ordered samples of one stream, oldest first.

    Insertion order is arrival order, which is also primary-axis order. Only
    the ingestion scheduler appends and only the retention trimmer truncates
    from the front. The RLock lets those run on separate cadence threads
    while readers take snapshots.
    """

    def __init__(self, samples: Iterable[Sample] = ()) -> None:
        self._samples: Deque[Sample] = deque(samples)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ ingest
    def append(self, samples: Iterable[Sample]) -> List[Sample]:
        """Append ``samples`` and return them as the delta to forward downstream."""
        delta = list(samples)
        with self._lock:
            self._samples.extend(delta)
        return delta

    def trim(self, retention_window: int) -> Optional[List[Sample]]:
        """Keep only the newest ``retention_window`` samples.

        Returns the retained suffix when the buffer was at or above the window
        (the sink must be repopulated with it), or ``None`` when the buffer is
        shorter than the window and nothing changed.
        """
        if retention_window <= 0:
            raise InvalidConfiguration("retention_window must be positive")
        with self._lock:
            if len(self._samples) < retention_window:
                return None
            excess = len(self._samples) - retention_window
            for _ in range(excess):
                self._samples.popleft()
            return list(self._samples)

    def locked(self) -> threading.RLock:
        """Return the buffer lock so a mutation and its sink update stay atomic.

        Usage::

            with buffer.locked():
                delta = buffer.append(batch)
                sink.append(delta)
        """
        return self._lock

    # ------------------------------------------------------------------- query
    def snapshot(self) -> List[Sample]:
        """Return a copy of the logical contents for read-only use."""
        with self._lock:
            return list(self._samples)

    def indices(self) -> List[int]:
        with self._lock:
            return [sample.index for sample in self._samples]

    def latest(self) -> Optional[Sample]:
        """Return the newest sample, or ``None`` if the buffer is empty."""
        with self._lock:
            if not self._samples:
                return None
            return self._samples[-1]

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.snapshot())
