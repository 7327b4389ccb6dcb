"""Live buffers and sample generators.

Containers here hold ingested samples in memory and stay decoupled from Qt so
they can be driven by the GUI, the headless runner, or tests alike.
"""

from __future__ import annotations

from .stream_buffer import StreamBuffer
from .trace_generator import ProgressiveTraceGenerator, SampleGenerator

__all__ = [
    "ProgressiveTraceGenerator",
    "SampleGenerator",
    "StreamBuffer",
]
