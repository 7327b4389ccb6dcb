"""Core windowing pipeline: datasets, scheduling, retention and wiring.

This package sits between the sample generator and whatever renders the
streams: it builds cyclic datasets, ingests them on a frame cadence into
bounded buffers, and trims those buffers on an independent interval.
"""

from .errors import GenerationError, InvalidConfiguration, StreamWindowError
from .models import Sample, Stream
from .dataset import CyclicDataset, CyclicDatasetBuilder, mirror_half_cycle
from ..data.stream_buffer import StreamBuffer
from .sinks import NullSink, RenderSink
from .cadence import (
    FrameCadence,
    IntervalCadence,
    ThreadedFrameCadence,
    ThreadedIntervalCadence,
)
from .scheduler import IngestionScheduler
from .retention import RetentionTrimmer
from .pipeline import Pipeline
from .pipeline_wiring import SinkFactory, build_pipeline, build_pipeline_async, build_streams

__all__ = [
    "StreamWindowError",
    "InvalidConfiguration",
    "GenerationError",
    "Sample",
    "Stream",
    "CyclicDataset",
    "CyclicDatasetBuilder",
    "mirror_half_cycle",
    "StreamBuffer",
    "RenderSink",
    "NullSink",
    "FrameCadence",
    "IntervalCadence",
    "ThreadedFrameCadence",
    "ThreadedIntervalCadence",
    "IngestionScheduler",
    "RetentionTrimmer",
    "Pipeline",
    "SinkFactory",
    "build_pipeline",
    "build_pipeline_async",
    "build_streams",
]
