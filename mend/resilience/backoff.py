"""Exponential backoff and Retry-After handling.

Delays are expressed in milliseconds throughout, matching the units of
``RateLimitConfig``.
"""

import math
import random
import re
import time
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional

from mend.core.models import RateLimitConfig, RateLimitError

DEFAULT_CONFIG = RateLimitConfig()

JITTER_RATIO = 0.25

# Up to ten digits of seconds; longer runs are invalid
_SECONDS_PATTERN = re.compile(r"\s*(\d{1,10})\s*")


def calculate_backoff_delay(
    attempt: int,
    base_delay_ms: float,
    max_delay_ms: float,
    retry_after_ms: Optional[float] = None,
) -> float:
    """Calculate delay with exponential backoff and jitter.

    Args:
        attempt: Zero-based retry index
        base_delay_ms: Delay for the first retry before jitter
        max_delay_ms: Upper bound on the returned delay
        retry_after_ms: Wait hint supplied by the server, overrides the estimate

    Returns:
        Delay in milliseconds
    """
    if retry_after_ms is not None:
        return min(retry_after_ms, max_delay_ms)

    exponential_delay = base_delay_ms * (2**attempt)

    # Uniform jitter in [-25%, +25%] so concurrent clients spread out
    jitter = exponential_delay * JITTER_RATIO * (random.random() * 2 - 1)

    return min(exponential_delay + jitter, max_delay_ms)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a Retry-After value given as seconds or an HTTP date.

    Args:
        value: Raw header value

    Returns:
        Wait in milliseconds, or None when absent, invalid or already past
    """
    if not value:
        return None

    match = _SECONDS_PATTERN.fullmatch(value)
    if match:
        return int(match.group(1)) * 1000.0

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if retry_at is None:
        return None

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    delay_ms = (retry_at.timestamp() - time.time()) * 1000.0
    return delay_ms if delay_ms > 0 else None


def parse_retry_after_header(headers: Optional[Mapping[str, Any]]) -> Optional[float]:
    """Read and parse the Retry-After header from any header mapping.

    Plain dicts are searched case-insensitively; ``requests`` and ``httpx``
    header objects already are.
    """
    if not headers:
        return None

    value = headers.get("retry-after") or headers.get("Retry-After")
    if value is None:
        for key, candidate in headers.items():
            if isinstance(key, str) and key.lower() == "retry-after":
                value = candidate
                break

    if value is None:
        return None
    return parse_retry_after(str(value))


def is_rate_limit_error(status: int, config: RateLimitConfig = DEFAULT_CONFIG) -> bool:
    """Check whether a status should be retried under ``config``."""
    return status in config.retry_status_codes


def create_rate_limit_error(
    status: int, message: str, retry_after_ms: Optional[float] = None
) -> RateLimitError:
    """Create a rate limit error value."""
    return RateLimitError(
        status=status,
        retry_after_ms=retry_after_ms,
        message=message,
        is_rate_limited=status == 429,
    )


def get_rate_limit_message(error: RateLimitError) -> str:
    """Get a user-facing message for a rate limit error."""
    if error.status == 429:
        if error.retry_after_ms:
            seconds = math.ceil(error.retry_after_ms / 1000)
            return f"Rate limit exceeded. Please wait {seconds} seconds before trying again."
        return "Rate limit exceeded. Please wait a moment before trying again."

    if error.status == 503:
        return "Service temporarily unavailable. Retrying..."

    if error.status in (502, 504):
        return "Server temporarily unavailable. Retrying..."

    return error.message or "An unexpected error occurred."
