"""Shared dataclasses for streams and their samples."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .dataset import CyclicDataset
    from .sinks import RenderSink
    from ..data.stream_buffer import StreamBuffer


@dataclass(frozen=True, slots=True)
class Sample:
    index: int
    values: tuple[float, ...]


@dataclass
class Stream:
    """One logical series: its dataset, live buffer and downstream sink."""

    name: str
    dataset: "CyclicDataset"
    buffer: "StreamBuffer"
    sink: "RenderSink"
