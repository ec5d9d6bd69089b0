"""Resilience patterns for Mend.

This module provides the building blocks for calling rate-limited services:
- Exponential backoff with jitter
- Retry-After header parsing
- Normalization of error shapes
- Retry driver returning typed results
"""

from .backoff import (
    DEFAULT_CONFIG,
    calculate_backoff_delay,
    create_rate_limit_error,
    get_rate_limit_message,
    is_rate_limit_error,
    parse_retry_after,
    parse_retry_after_header,
)
from .error_info import extract_error_info, status_from_message
from .retry import resolve_config, retry_or_raise, with_rate_limit_retry

__all__ = [
    "DEFAULT_CONFIG",
    "calculate_backoff_delay",
    "parse_retry_after",
    "parse_retry_after_header",
    "is_rate_limit_error",
    "create_rate_limit_error",
    "get_rate_limit_message",
    "extract_error_info",
    "status_from_message",
    "resolve_config",
    "with_rate_limit_retry",
    "retry_or_raise",
]
