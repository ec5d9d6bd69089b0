"""Error classification and recovery for AI service calls."""

from .classifier import (
    CLASSIFICATION_RULES,
    ClassificationRule,
    classify_ai_error,
    classify_by_status_code,
)
from .fallback import (
    ALL_MODELS,
    MODEL_EQUIVALENCES,
    complete_with_fallback,
    get_fallback_info,
    get_fallback_models,
    get_model_info,
    get_provider_for_model,
    should_fallback,
)
from .options import (
    FALLBACK_MODELS,
    RECOVERY_OPTION_TEXT,
    can_recover_with,
    get_fallback_model,
    get_recovery_options,
    log_ai_error,
)

__all__ = [
    # Classification
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "classify_ai_error",
    "classify_by_status_code",
    # Recovery options
    "RECOVERY_OPTION_TEXT",
    "FALLBACK_MODELS",
    "get_recovery_options",
    "can_recover_with",
    "log_ai_error",
    "get_fallback_model",
    # Model fallback
    "ALL_MODELS",
    "MODEL_EQUIVALENCES",
    "get_model_info",
    "get_provider_for_model",
    "get_fallback_models",
    "should_fallback",
    "complete_with_fallback",
    "get_fallback_info",
]
