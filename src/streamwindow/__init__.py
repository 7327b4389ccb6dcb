"""streamwindow: bounded real-time multi-series ingestion buffers.

A frame-paced scheduler pulls batches from cyclic per-stream datasets into
bounded buffers, a periodic trimmer enforces a retention window, and a rate
meter reports how many samples per second are being ingested.
"""

from .core import (
    CyclicDataset,
    CyclicDatasetBuilder,
    GenerationError,
    IngestionScheduler,
    InvalidConfiguration,
    Pipeline,
    RetentionTrimmer,
    Sample,
    Stream,
    StreamBuffer,
    StreamWindowError,
    build_pipeline,
)
from .analysis.rate import RateAccumulator, RateMeter
from .config import WindowConfig, config_from_mapping, load_config

__all__ = [
    "CyclicDataset",
    "CyclicDatasetBuilder",
    "GenerationError",
    "IngestionScheduler",
    "InvalidConfiguration",
    "Pipeline",
    "RateAccumulator",
    "RateMeter",
    "RetentionTrimmer",
    "Sample",
    "Stream",
    "StreamBuffer",
    "StreamWindowError",
    "WindowConfig",
    "build_pipeline",
    "config_from_mapping",
    "load_config",
]
