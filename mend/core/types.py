"""Core type definitions and enums for Mend."""

from enum import Enum


class AIErrorCategory(str, Enum):
    """Categories for AI service failures."""

    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    PARSING = "parsing"
    API = "api"  # Derived from an HTTP status code
    QUOTA = "quota"
    MODEL_UNAVAILABLE = "model_unavailable"
    CONTEXT_LENGTH = "context_length"
    UNKNOWN = "unknown"


class RecoveryAction(str, Enum):
    """Next steps that can be offered for a classified error."""

    RETRY = "retry"
    RETRY_WITH_SMALLER_CONTEXT = "retry_with_smaller_context"
    SWITCH_MODEL = "switch_model"
    WAIT_AND_RETRY = "wait_and_retry"
    MANUAL_EDIT = "manual_edit"
    CONTACT_SUPPORT = "contact_support"
    CHECK_CONNECTION = "check_connection"


class FallbackErrorType(str, Enum):
    """Error types that can trigger a model fallback."""

    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    MODEL_UNAVAILABLE = "model_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"


class ProviderType(str, Enum):
    """AI providers known to the model catalogue."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
