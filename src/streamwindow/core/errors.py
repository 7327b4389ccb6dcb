"""Exception hierarchy for streamwindow."""

from __future__ import annotations


class StreamWindowError(Exception):
    """Base exception for all streamwindow errors."""


class InvalidConfiguration(StreamWindowError, ValueError):
    """A size, interval or policy value is out of range.

    Raised while building configuration or pipeline objects, never from a
    steady-state tick.
    """


class GenerationError(StreamWindowError):
    """A stream's dataset could not be generated at startup."""

    def __init__(self, message: str, *, stream: str | None = None) -> None:
        self.stream = stream
        if stream is not None:
            message = f"{stream}: {message}"
        super().__init__(message)
