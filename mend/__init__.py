"""Mend - Retry, backoff and error recovery for AI service calls."""

from .core import (
    AIError,
    AIErrorCategory,
    ConfigurationError,
    ErrorInfo,
    FallbackAttemptError,
    FallbackConfig,
    FallbackErrorType,
    FallbackExhaustedError,
    FallbackResult,
    GlobalConfig,
    MendError,
    ModelInfo,
    ProviderType,
    RateLimitConfig,
    RateLimitedError,
    RateLimitError,
    RecoveryAction,
    RecoveryOption,
    RetryResult,
    config,
    get_config,
    reload_config,
)
from .recovery import (
    can_recover_with,
    classify_ai_error,
    complete_with_fallback,
    get_fallback_model,
    get_fallback_models,
    get_recovery_options,
    log_ai_error,
    should_fallback,
)
from .resilience import (
    calculate_backoff_delay,
    extract_error_info,
    get_rate_limit_message,
    parse_retry_after,
    parse_retry_after_header,
    retry_or_raise,
    with_rate_limit_retry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Types
    "AIErrorCategory",
    "RecoveryAction",
    "FallbackErrorType",
    "ProviderType",
    # Exceptions
    "MendError",
    "ConfigurationError",
    "RateLimitedError",
    "FallbackExhaustedError",
    # Models
    "RateLimitConfig",
    "RateLimitError",
    "ErrorInfo",
    "RetryResult",
    "AIError",
    "RecoveryOption",
    "ModelInfo",
    "FallbackConfig",
    "FallbackAttemptError",
    "FallbackResult",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
    # Resilience
    "calculate_backoff_delay",
    "parse_retry_after",
    "parse_retry_after_header",
    "get_rate_limit_message",
    "extract_error_info",
    "with_rate_limit_retry",
    "retry_or_raise",
    # Recovery
    "classify_ai_error",
    "get_recovery_options",
    "can_recover_with",
    "log_ai_error",
    "get_fallback_model",
    "get_fallback_models",
    "should_fallback",
    "complete_with_fallback",
]
