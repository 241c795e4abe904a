"""Timing helpers for request handlers and provider calls."""

import time
from contextlib import contextmanager
from typing import Iterator

from mixology.logging import get_logger

logger = get_logger(__name__)

TIMING_PREFIX = "[TIMING]"


def format_duration(ms: int) -> str:
    """12500 -> '12.5s', 750 -> '750ms'."""
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


def elapsed_ms_since(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


@contextmanager
def time_span(name: str, **extra: object) -> Iterator[dict]:
    """Log how long the block took. Fields added to the yielded dict are logged too."""
    fields: dict = dict(extra)
    start = time.perf_counter()
    try:
        yield fields
    finally:
        elapsed = elapsed_ms_since(start)
        parts = [f"elapsed_ms={elapsed}", f"({format_duration(elapsed)})"] + [
            f"{k}={v}" for k, v in fields.items()
        ]
        logger.info("%s %s %s", TIMING_PREFIX, name, " ".join(parts))
