"""
Run the windowing pipeline without a GUI.

Ingestion, trimming and rate metering run on threaded cadences for
``--duration`` seconds; the published rate and final buffer lengths are
logged. Useful for checking throughput and the retention invariant on a
machine without a display::

    python -m streamwindow.tools.headless --duration 10 --streams 5
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Sequence

from ..core.cadence import ThreadedFrameCadence, ThreadedIntervalCadence
from ..core.errors import StreamWindowError
from ..core.pipeline_wiring import build_pipeline
from .cli_common import add_config_arguments, configure_logging, resolve_config

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Headless streamwindow run")
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Seconds to run before tearing the pipeline down (default: 10)",
    )
    parser.add_argument(
        "--split-reset",
        action="store_true",
        help="Reset the rate window from its own timer instead of the rate timer",
    )
    return add_config_arguments(parser)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        cfg = resolve_config(args)
        pipeline = build_pipeline(
            cfg,
            publish=lambda rate: logger.info("%.0f data points / s", rate),
        )
    except StreamWindowError as exc:
        logger.error("Startup failed: %s", exc)
        return 1

    reset = ThreadedIntervalCadence(cfg.rate_reset_ms) if args.split_reset else None
    pipeline.start(
        ThreadedFrameCadence(cfg.frame_rate_hz),
        ThreadedIntervalCadence(cfg.trim_interval_ms, thread_name="StreamWindowTrim"),
        ThreadedIntervalCadence(cfg.rate_interval_ms, thread_name="StreamWindowRate"),
        reset,
    )
    try:
        time.sleep(max(0.0, float(args.duration)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        pipeline.stop()

    for name, length in pipeline.buffer_lengths().items():
        logger.info("%s: %d sample(s) buffered", name, length)
    logger.info("Cursor stopped at x=%d", pipeline.scheduler.x_pos)
    return 0


if __name__ == "__main__":
    sys.exit(main())
