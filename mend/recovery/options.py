"""Presentable recovery options for classified errors."""

import logging
from typing import Dict, List, Optional, Tuple

from mend.core.models import AIError, RecoveryOption
from mend.core.types import RecoveryAction

logger = logging.getLogger(__name__)

# (label, description) for each action
RECOVERY_OPTION_TEXT: Dict[RecoveryAction, Tuple[str, str]] = {
    RecoveryAction.RETRY: ("Try Again", "Attempt the generation again"),
    RecoveryAction.RETRY_WITH_SMALLER_CONTEXT: (
        "Try with Less Content",
        "Reduce the scope and try again",
    ),
    RecoveryAction.SWITCH_MODEL: (
        "Use Different Model",
        "Switch to an alternative AI model",
    ),
    RecoveryAction.WAIT_AND_RETRY: (
        "Wait and Retry",
        "Wait for the service to recover, then try again",
    ),
    RecoveryAction.MANUAL_EDIT: ("Edit Manually", "Make changes manually instead"),
    RecoveryAction.CONTACT_SUPPORT: (
        "Contact Support",
        "Get help from the support team",
    ),
    RecoveryAction.CHECK_CONNECTION: (
        "Check Connection",
        "Verify your internet connection",
    ),
}

# Same-family alternatives, most similar first
FALLBACK_MODELS: Dict[str, List[str]] = {
    "gpt-4": ["gpt-4-turbo", "gpt-3.5-turbo-16k"],
    "gpt-4-turbo": ["gpt-4", "gpt-3.5-turbo-16k"],
    "gpt-3.5-turbo": ["gpt-3.5-turbo-16k", "gpt-4"],
    "gpt-3.5-turbo-16k": ["gpt-3.5-turbo", "gpt-4"],
    "claude-3-opus": ["claude-3-sonnet", "gpt-4"],
    "claude-3-sonnet": ["claude-3-opus", "gpt-4"],
    "gemini-pro": ["gpt-4", "claude-3-sonnet"],
}


def get_recovery_options(error: AIError) -> List[RecoveryOption]:
    """Get recovery options for an AI error, primary option first."""
    options = []
    for index, action in enumerate(error.recovery_actions):
        label, description = RECOVERY_OPTION_TEXT[action]
        options.append(
            RecoveryOption(
                action=action,
                label=label,
                description=description,
                is_primary=index == 0,
            )
        )
    return options


def can_recover_with(error: AIError, action: RecoveryAction) -> bool:
    """Check if an error is recoverable with a specific action."""
    return action in error.recovery_actions


def log_ai_error(error: AIError, context: str) -> None:
    """Log a classified error with its recovery context."""
    logger.error(
        f"AI error in {context}: [{error.category.value}] {error.message}",
        extra={
            "category": error.category.value,
            "retryable": error.retryable,
            "recovery_actions": [a.value for a in error.recovery_actions],
        },
    )


def get_fallback_model(current_model: str) -> Optional[str]:
    """Get the preferred same-family fallback for a failed model."""
    fallbacks = FALLBACK_MODELS.get(current_model)
    return fallbacks[0] if fallbacks else None
