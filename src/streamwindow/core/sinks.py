"""Downstream rendering sinks fed by the scheduler and the trimmer."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Sample

__all__ = ["RenderSink", "NullSink"]


class RenderSink(Protocol):
    """Per-stream display target.

    Both calls are fire-and-forget: return values are ignored and the sink is
    expected not to block noticeably.
    """

    def append(self, samples: Sequence[Sample]) -> None:  # pragma: no cover - protocol
        ...

    def replace_all(self, samples: Sequence[Sample]) -> None:  # pragma: no cover - protocol
        ...


class NullSink:
    """No-op sink used when a stream has no display attached."""

    def append(self, samples: Sequence[Sample]) -> None:  # pragma: no cover - trivial
        return

    def replace_all(self, samples: Sequence[Sample]) -> None:  # pragma: no cover - trivial
        return
