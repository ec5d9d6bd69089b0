"""Core Pydantic data models for Mend."""

from typing import Any, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import AIErrorCategory, FallbackErrorType, ProviderType, RecoveryAction

T = TypeVar("T")


class RateLimitConfig(BaseModel):
    """Retry configuration for rate-limited calls."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    base_delay_ms: float = Field(default=1000.0, gt=0.0, description="Delay before first retry")
    max_delay_ms: float = Field(default=30000.0, gt=0.0, description="Upper bound on any delay")
    retry_status_codes: Tuple[int, ...] = Field(
        default=(429, 502, 503, 504),
        description="HTTP statuses that are retried",
    )

    @model_validator(mode="after")
    def _check_delays(self) -> "RateLimitConfig":
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        return self


class RateLimitError(BaseModel):
    """Final error of a retried call."""

    model_config = ConfigDict(frozen=True)

    status: int = Field(..., description="HTTP status, 0 when unknown")
    retry_after_ms: Optional[float] = Field(
        default=None, description="Server-supplied wait hint in ms"
    )
    message: str = Field(default="", description="Error message")
    is_rate_limited: bool = Field(default=False, description="True for HTTP 429")


class ErrorInfo(BaseModel):
    """Uniform view of any thrown value: status, retry hint and message."""

    model_config = ConfigDict(frozen=True)

    status: int = 0
    retry_after_ms: Optional[float] = None
    message: str = ""


class RetryResult(BaseModel, Generic[T]):
    """Outcome of a retried call. Either ``data`` or ``error`` is meaningful."""

    data: Optional[T] = Field(default=None, description="Return value on success")
    error: Optional[RateLimitError] = Field(default=None, description="Final error on failure")
    attempts: int = Field(..., ge=1, description="Calls made, including the first")
    total_delay_ms: float = Field(default=0.0, ge=0.0, description="Time spent sleeping")

    @model_validator(mode="after")
    def _check_outcome(self) -> "RetryResult[T]":
        if self.error is not None and self.data is not None:
            raise ValueError("RetryResult cannot carry both data and error")
        return self

    @property
    def succeeded(self) -> bool:
        return self.error is None


class AIError(BaseModel):
    """Classified AI failure with ranked recovery actions."""

    model_config = ConfigDict(frozen=True)

    category: AIErrorCategory
    message: str
    user_message: str
    recovery_actions: List[RecoveryAction] = Field(..., min_length=1)
    retryable: bool
    suggested_wait_ms: Optional[float] = None
    original_error: Any = Field(default=None, exclude=True, repr=False)

    @property
    def primary_action(self) -> RecoveryAction:
        """Default suggestion for this error."""
        return self.recovery_actions[0]


class RecoveryOption(BaseModel):
    """Presentable recovery action (button label and description)."""

    model_config = ConfigDict(frozen=True)

    action: RecoveryAction
    label: str
    description: str
    is_primary: bool = False


class ModelInfo(BaseModel):
    """Catalogue entry for an AI model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    provider: ProviderType
    context_window: int = Field(..., gt=0)


class FallbackConfig(BaseModel):
    """Model fallback behaviour."""

    model_config = ConfigDict(frozen=True)

    max_fallback_attempts: int = Field(
        default=2, ge=0, description="Fallback models tried after the primary"
    )
    enable_fallback: bool = Field(default=True, description="Whether to fall back at all")
    fallback_order: Tuple[ProviderType, ...] = Field(
        default=(ProviderType.OPENAI, ProviderType.ANTHROPIC, ProviderType.GEMINI),
        description="Provider preference",
    )
    fallback_on_errors: Tuple[FallbackErrorType, ...] = Field(
        default=(
            FallbackErrorType.RATE_LIMIT,
            FallbackErrorType.SERVER_ERROR,
            FallbackErrorType.MODEL_UNAVAILABLE,
            FallbackErrorType.TIMEOUT,
            FallbackErrorType.QUOTA_EXCEEDED,
            FallbackErrorType.NETWORK,
        ),
        description="Error types that trigger a fallback",
    )


class FallbackAttemptError(BaseModel):
    """A model that failed during a fallback sequence."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: str
    error: BaseException


class FallbackResult(BaseModel, Generic[T]):
    """Successful call made through the fallback sequence."""

    data: Optional[T] = None
    model: str = Field(..., description="Model that produced the data")
    original_model: str = Field(..., description="Model originally requested")
    used_fallback: bool = False
    fallback_attempts: int = Field(default=0, ge=0)
    errors: List[FallbackAttemptError] = Field(default_factory=list)
