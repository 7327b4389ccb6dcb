"""QTimer-backed cadence drivers for running the pipeline on the Qt event loop."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from ..core.errors import InvalidConfiguration

Callback = Callable[[], None]


class QtFrameCadence(QObject):
    """Single-shot QTimer that fires the requested callback on the next frame."""

    def __init__(self, frame_rate_hz: float = 60.0, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        if frame_rate_hz <= 0:
            raise InvalidConfiguration("frame_rate_hz must be positive")
        self._callback: Optional[Callback] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(1, int(round(1000.0 / frame_rate_hz))))
        self._timer.timeout.connect(self._fire)

    def request(self, callback: Callback) -> None:
        self._callback = callback
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class QtIntervalCadence(QObject):
    """Repeating QTimer calling one callback every ``interval_ms``."""

    def __init__(self, interval_ms: float, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        if interval_ms <= 0:
            raise InvalidConfiguration("interval_ms must be positive")
        self._callback: Optional[Callback] = None
        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(round(interval_ms))))
        self._timer.timeout.connect(self._fire)

    def start(self, callback: Callback) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()
