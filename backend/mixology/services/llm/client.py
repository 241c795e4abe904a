import time
from typing import Any, Callable

from mixology.logging import get_logger
from mixology.utils.timing import TIMING_PREFIX, format_duration

logger = get_logger(__name__)


def run_with_logging(
    prompt_name: str,
    prompt_version: str,
    fn: Callable[..., Any],
    *,
    provider: str,
    model: str,
    **kwargs: Any,
) -> Any:
    """Call `fn(**kwargs)` and log start, end and latency under the prompt's name and version."""
    start = time.time()
    logger.info(
        "%s llm.call.start name=%s version=%s provider=%s model=%s",
        TIMING_PREFIX,
        prompt_name,
        prompt_version,
        provider,
        model,
    )
    try:
        result = fn(**kwargs)
    except Exception:
        latency_ms = int((time.time() - start) * 1000)
        logger.warning(
            "%s llm.call.failed name=%s provider=%s latency_ms=%s",
            TIMING_PREFIX,
            prompt_name,
            provider,
            latency_ms,
        )
        raise
    latency_ms = int((time.time() - start) * 1000)
    logger.info(
        "%s llm.call.end name=%s provider=%s latency_ms=%s (%s) output_chars=%s",
        TIMING_PREFIX,
        prompt_name,
        provider,
        latency_ms,
        format_duration(latency_ms),
        len(result) if isinstance(result, str) else "-",
    )
    return result
