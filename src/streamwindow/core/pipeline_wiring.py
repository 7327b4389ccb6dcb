"""Factory helpers that wire a :class:`Pipeline` from configuration."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from ..analysis.rate import Clock, RateAccumulator, RateMeter, RatePublisher, monotonic_ms
from ..config import WindowConfig
from ..data.stream_buffer import StreamBuffer
from ..data.trace_generator import ProgressiveTraceGenerator, SampleGenerator
from .dataset import CyclicDatasetBuilder
from .errors import GenerationError
from .models import Stream
from .pipeline import Pipeline
from .retention import RetentionTrimmer
from .scheduler import IngestionScheduler
from .sinks import NullSink, RenderSink

logger = logging.getLogger(__name__)

SinkFactory = Callable[[str, int], RenderSink]


async def build_streams(
    cfg: WindowConfig,
    *,
    generator: Optional[SampleGenerator] = None,
    sink_factory: Optional[SinkFactory] = None,
) -> List[Stream]:
    """
    Generate every stream's dataset concurrently and return the streams.

    Parameters
    ----------
    cfg:
        Validated configuration; stream order here is the ingestion order.
    generator:
        Source of base waveforms. Defaults to a
        :class:`ProgressiveTraceGenerator` seeded from ``cfg.seed``.
    sink_factory:
        Called with ``(name, index)`` to create each stream's sink. Streams
        get a :class:`NullSink` when omitted.

    Raises
    ------
    GenerationError
        When any dataset fails under the ``"abort"`` policy, or when every
        dataset fails under ``"exclude"``.
    """
    cfg = cfg.sanitized()
    generator = generator or ProgressiveTraceGenerator(step=cfg.generator_step, seed=cfg.seed)
    builder = CyclicDatasetBuilder(generator)

    results = await asyncio.gather(
        *(builder.build(cfg.half_length, cfg.z_level(i)) for i in range(len(cfg.streams))),
        return_exceptions=True,
    )

    streams: List[Stream] = []
    failures: List[tuple[str, GenerationError]] = []
    for index, (name, result) in enumerate(zip(cfg.streams, results)):
        if isinstance(result, BaseException):
            if not isinstance(result, GenerationError):
                raise result
            failures.append((name, result))
            continue
        sink = sink_factory(name, index) if sink_factory is not None else NullSink()
        streams.append(Stream(name=name, dataset=result, buffer=StreamBuffer(), sink=sink))

    if failures:
        if cfg.on_generation_error == "abort":
            name, exc = failures[0]
            raise GenerationError(str(exc), stream=name) from exc
        for name, exc in failures:
            logger.warning("Excluding stream %r, dataset generation failed: %s", name, exc)
        if not streams:
            raise GenerationError("dataset generation failed for every stream")

    logger.info(
        "Built %d stream(s) with %d-point cyclic datasets",
        len(streams),
        len(streams[0].dataset),
    )
    return streams


async def build_pipeline_async(
    cfg: WindowConfig,
    *,
    generator: Optional[SampleGenerator] = None,
    sink_factory: Optional[SinkFactory] = None,
    publish: Optional[RatePublisher] = None,
    clock: Clock = monotonic_ms,
) -> Pipeline:
    """Build streams, then the scheduler, trimmer and rate meter around them."""
    cfg = cfg.sanitized()
    streams = await build_streams(cfg, generator=generator, sink_factory=sink_factory)
    accumulator = RateAccumulator(clock=clock)
    scheduler = IngestionScheduler(
        streams,
        cfg.points_per_frame,
        accumulator,
        wrap_cursor=cfg.wrap_cursor,
    )
    trimmer = RetentionTrimmer(streams, cfg.retention_window)
    rate_meter = RateMeter(
        accumulator,
        publish=publish,
        reset_interval_ms=cfg.rate_reset_ms,
        clock=clock,
    )
    return Pipeline(streams=streams, scheduler=scheduler, trimmer=trimmer, rate_meter=rate_meter)


def build_pipeline(
    cfg: WindowConfig,
    *,
    generator: Optional[SampleGenerator] = None,
    sink_factory: Optional[SinkFactory] = None,
    publish: Optional[RatePublisher] = None,
    clock: Clock = monotonic_ms,
) -> Pipeline:
    """Blocking wrapper around :func:`build_pipeline_async` for sync callers."""
    return asyncio.run(
        build_pipeline_async(
            cfg,
            generator=generator,
            sink_factory=sink_factory,
            publish=publish,
            clock=clock,
        )
    )


__all__ = ["SinkFactory", "build_pipeline", "build_pipeline_async", "build_streams"]
