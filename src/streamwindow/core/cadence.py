"""
Cadence primitives that drive the pipeline's periodic tasks.

The pipeline only assumes two things about time: a frame callback runs
"soon" after it is requested, and an interval callback runs roughly every
``interval_ms``. The threaded drivers here satisfy that without an event
loop; :mod:`streamwindow.gui.cadence` provides QTimer-based equivalents.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class FrameCadence(Protocol):
    """One-shot "next frame" requests; the caller re-requests after each run."""

    def request(self, callback: Callback) -> None:  # pragma: no cover - protocol
        ...

    def cancel(self) -> None:  # pragma: no cover - protocol
        ...


class IntervalCadence(Protocol):
    """Repeating callback at an approximately fixed millisecond period."""

    def start(self, callback: Callback) -> None:  # pragma: no cover - protocol
        ...

    def stop(self) -> None:  # pragma: no cover - protocol
        ...


class ThreadedFrameCadence:
    """
    Frame pacer backed by one daemon worker thread.

    Each :meth:`request` runs the callback once, one frame period later. Only
    one request is outstanding at a time; a newer request replaces an older
    one that has not fired yet.
    """

    def __init__(self, frame_rate_hz: float = 60.0, *, thread_name: Optional[str] = None) -> None:
        if frame_rate_hz <= 0:
            raise InvalidConfiguration("frame_rate_hz must be positive")
        self.period_s = 1.0 / float(frame_rate_hz)
        self._thread_name = thread_name or "StreamWindowFrames"
        self._lock = threading.Lock()
        self._pending: Optional[Callback] = None
        self._wake = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        # Idents of cancelled workers that may still be inside a callback.
        self._retired: set[int] = set()

    def request(self, callback: Callback) -> None:
        with self._lock:
            if threading.get_ident() in self._retired:
                return
            self._pending = callback
            if self._thread is None or not self._thread.is_alive():
                self._stop = threading.Event()
                self._thread = threading.Thread(
                    target=self._run,
                    args=(self._stop,),
                    name=self._thread_name,
                    daemon=True,
                )
                self._thread.start()
        self._wake.set()

    def cancel(self) -> None:
        with self._lock:
            self._pending = None
            thread = self._thread
            self._thread = None
            self._stop.set()
            if thread is not None and thread.is_alive():
                self._retired.add(thread.ident)
        self._wake.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
            if not thread.is_alive():
                with self._lock:
                    self._retired.discard(thread.ident)

    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _run(self, stop: threading.Event) -> None:
        try:
            self._loop(stop)
        finally:
            with self._lock:
                self._retired.discard(threading.get_ident())

    def _loop(self, stop: threading.Event) -> None:
        while not stop.is_set():
            self._wake.wait()
            self._wake.clear()
            if stop.wait(self.period_s):
                break
            with self._lock:
                callback, self._pending = self._pending, None
            if callback is None:
                continue
            try:
                callback()
            except Exception:
                logger.exception("Frame callback failed; frame loop stops")
                break


class ThreadedIntervalCadence:
    """Daemon thread invoking a callback every ``interval_ms`` until stopped."""

    def __init__(self, interval_ms: float, *, thread_name: Optional[str] = None) -> None:
        if interval_ms <= 0:
            raise InvalidConfiguration("interval_ms must be positive")
        self.interval_ms = float(interval_ms)
        self._thread_name = thread_name or f"StreamWindowInterval({interval_ms:g}ms)"
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self, callback: Callback) -> None:
        self.stop()
        stop = threading.Event()
        self._stop = stop

        def _target() -> None:
            period_s = self.interval_ms / 1000.0
            while not stop.wait(period_s):
                try:
                    callback()
                except Exception:
                    logger.exception("Interval callback failed: %r", callback)

        self._thread = threading.Thread(target=_target, name=self._thread_name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()
