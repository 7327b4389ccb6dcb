"""Opt-in timing of the pipeline's periodic work.

Set ``STREAMWINDOW_DEBUG=1`` to log how long every ingestion tick and
retention trim takes, at DEBUG level on this module's logger.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

DEBUG_ENV_VAR = "STREAMWINDOW_DEBUG"

logger = logging.getLogger(__name__)


def _timing_requested() -> bool:
    return os.getenv(DEBUG_ENV_VAR, "").lower() in {"1", "true", "yes", "on"}


@contextmanager
def time_block(label: str) -> Iterator[None]:
    """Log ``"<label> took N ms"`` for the wrapped block when timing is on."""
    if not _timing_requested():
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s took %.3f ms", label, (time.perf_counter() - start) * 1000.0)
