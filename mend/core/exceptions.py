"""Custom exceptions for Mend."""

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .models import FallbackAttemptError, RateLimitError, RetryResult


class MendError(Exception):
    """Base exception for all Mend errors."""

    pass


class ConfigurationError(MendError):
    """Raised when retry or fallback configuration is invalid."""

    pass


class RateLimitedError(MendError):
    """Raised when a call stays rate limited after all retries.

    Wraps the final ``RateLimitError`` together with how many attempts were
    made and how long was spent waiting between them.
    """

    def __init__(
        self,
        message: str,
        rate_limit_error: "RateLimitError",
        attempts: int,
        total_delay_ms: float,
    ):
        self.rate_limit_error = rate_limit_error
        self.attempts = attempts
        self.total_delay_ms = total_delay_ms
        super().__init__(message)

    @property
    def status(self) -> int:
        """HTTP status of the final attempt."""
        return self.rate_limit_error.status

    @classmethod
    def from_result(
        cls, result: "RetryResult[Any]", message: Optional[str] = None
    ) -> "RateLimitedError":
        """Build from a failed retry result.

        Args:
            result: Retry result with ``error`` set
            message: Exception message, defaults to the user-facing rate limit message

        Raises:
            ValueError: If the result did not fail
        """
        if result.error is None:
            raise ValueError("Cannot build RateLimitedError from a successful result")

        if message is None:
            from mend.resilience.backoff import get_rate_limit_message

            message = get_rate_limit_message(result.error)

        return cls(message, result.error, result.attempts, result.total_delay_ms)


class FallbackExhaustedError(MendError):
    """Raised when every model in a fallback sequence failed."""

    def __init__(self, original_model: str, errors: List["FallbackAttemptError"]):
        self.original_model = original_model
        self.errors = errors
        tried = ", ".join(e.model for e in errors) or "none"
        super().__init__(
            f"All fallback attempts failed for '{original_model}' (tried: {tried})"
        )
