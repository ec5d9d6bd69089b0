"""Core infrastructure for Mend."""

from .config import GlobalConfig, config, get_config, reload_config
from .exceptions import (
    ConfigurationError,
    FallbackExhaustedError,
    MendError,
    RateLimitedError,
)
from .models import (
    AIError,
    ErrorInfo,
    FallbackAttemptError,
    FallbackConfig,
    FallbackResult,
    ModelInfo,
    RateLimitConfig,
    RateLimitError,
    RecoveryOption,
    RetryResult,
)
from .types import AIErrorCategory, FallbackErrorType, ProviderType, RecoveryAction

__all__ = [
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
]
