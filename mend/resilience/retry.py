"""Retry driver with exponential backoff for rate-limited calls.

Failures are reported as a typed ``RetryResult`` instead of being raised, so
callers can decide how to surface them.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

from pydantic import ValidationError

from mend.core.config import get_config
from mend.core.exceptions import ConfigurationError, RateLimitedError
from mend.core.models import RateLimitConfig, RateLimitError, RetryResult

from .backoff import calculate_backoff_delay, create_rate_limit_error, is_rate_limit_error
from .error_info import extract_error_info

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnRetry = Callable[[int, float, RateLimitError], Any]


def resolve_config(
    config: Union[RateLimitConfig, Dict[str, Any], None] = None,
) -> RateLimitConfig:
    """Merge partial overrides onto the environment defaults.

    Args:
        config: Full config, dict of overrides, or None for defaults

    Raises:
        ConfigurationError: If the merged configuration is invalid
    """
    if isinstance(config, RateLimitConfig):
        return config

    defaults = get_config().rate_limit_config()
    if not config:
        return defaults

    try:
        return RateLimitConfig(**{**defaults.model_dump(), **config})
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid retry configuration: {e}")


async def with_rate_limit_retry(
    func: Callable[..., Awaitable[T]],
    config: Union[RateLimitConfig, Dict[str, Any], None] = None,
    *args: Any,
    on_retry: Optional[OnRetry] = None,
    **kwargs: Any,
) -> RetryResult[T]:
    """Execute function, retrying on rate limit and gateway errors.

    Args:
        func: Async function to execute
        config: Retry configuration or partial overrides
        *args: Positional arguments for function
        on_retry: Called as ``on_retry(attempt, delay_ms, error)`` before each
            sleep; may be sync or async
        **kwargs: Keyword arguments for function

    Returns:
        Result with ``data`` on success or the final ``error``
    """
    cfg = resolve_config(config)
    attempts = 0
    total_delay_ms = 0.0

    while attempts <= cfg.max_retries:
        try:
            data = await func(*args, **kwargs)
        except Exception as e:
            attempts += 1
            info = extract_error_info(e)
            error = create_rate_limit_error(info.status, info.message, info.retry_after_ms)

            if not is_rate_limit_error(info.status, cfg):
                logger.debug(
                    f"Status {info.status} is not retryable, giving up after "
                    f"{attempts} attempt(s): {info.message}"
                )
                return RetryResult(error=error, attempts=attempts, total_delay_ms=total_delay_ms)

            if attempts > cfg.max_retries:
                logger.warning(
                    f"Retries exhausted after {attempts} attempts "
                    f"(status={info.status}, waited {total_delay_ms:.0f}ms)"
                )
                return RetryResult(error=error, attempts=attempts, total_delay_ms=total_delay_ms)

            delay_ms = calculate_backoff_delay(
                attempts - 1,
                cfg.base_delay_ms,
                cfg.max_delay_ms,
                info.retry_after_ms,
            )

            logger.warning(
                f"Retry attempt {attempts}/{cfg.max_retries}: status={info.status}, "
                f"delay={delay_ms:.0f}ms, retry_after={info.retry_after_ms}"
            )

            if on_retry is not None:
                outcome = on_retry(attempts, delay_ms, error)
                if inspect.isawaitable(outcome):
                    await outcome

            await asyncio.sleep(delay_ms / 1000)
            total_delay_ms += delay_ms
        else:
            if attempts > 0:
                logger.info(
                    f"Request succeeded after {attempts + 1} attempts "
                    f"(waited {total_delay_ms:.0f}ms)"
                )
            return RetryResult(data=data, attempts=attempts + 1, total_delay_ms=total_delay_ms)

    # Only reachable with a negative max_retries, which validation rejects
    return RetryResult(
        error=create_rate_limit_error(429, "Max retries exceeded"),
        attempts=max(attempts, 1),
        total_delay_ms=total_delay_ms,
    )


async def retry_or_raise(
    func: Callable[..., Awaitable[T]],
    config: Union[RateLimitConfig, Dict[str, Any], None] = None,
    *args: Any,
    on_retry: Optional[OnRetry] = None,
    **kwargs: Any,
) -> T:
    """Execute function with retries, raising when it still fails.

    Returns:
        Result from function

    Raises:
        RateLimitedError: If the call failed after retries or was not retryable
    """
    result: RetryResult[T] = await with_rate_limit_retry(
        func, config, *args, on_retry=on_retry, **kwargs
    )

    if result.error is not None:
        exc = RateLimitedError.from_result(result)
        logger.error(
            f"{exc} (attempts={result.attempts}, "
            f"total_delay_ms={result.total_delay_ms:.0f}, status={result.error.status})"
        )
        raise exc

    return result.data  # type: ignore[return-value]
