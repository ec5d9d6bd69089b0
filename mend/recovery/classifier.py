"""Classify AI service failures into categories with recovery actions.

Classification is an ordered decision table. Each ``ClassificationRule``
pairs a predicate over the exception and its lowercased message with a fixed
outcome; the first matching rule wins. Errors no message rule recognizes are
classified from their HTTP status, then fall back to ``unknown``.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from mend.core.exceptions import RateLimitedError
from mend.core.models import AIError
from mend.core.types import AIErrorCategory, RecoveryAction
from mend.resilience.error_info import extract_error_info

DEFAULT_RATE_LIMIT_WAIT_MS = 60000

Category = AIErrorCategory
Action = RecoveryAction


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table."""

    category: AIErrorCategory
    predicate: Callable[[BaseException, str], bool]
    user_message: str
    recovery_actions: Tuple[RecoveryAction, ...]
    retryable: bool

    def matches(self, error: BaseException, message: str) -> bool:
        return self.predicate(error, message)

    def build(self, error: BaseException) -> AIError:
        return AIError(
            category=self.category,
            message=str(error),
            user_message=self.user_message,
            recovery_actions=list(self.recovery_actions),
            retryable=self.retryable,
            original_error=error,
        )


def _contains_any(*needles: str) -> Callable[[BaseException, str], bool]:
    return lambda error, message: any(needle in message for needle in needles)


def _is_network(error: BaseException, message: str) -> bool:
    if isinstance(error, ConnectionError):
        return True
    return any(n in message for n in ("network", "fetch", "connection"))


def _is_timeout(error: BaseException, message: str) -> bool:
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return True
    return "timeout" in message or "timed out" in message


def _is_model_unavailable(error: BaseException, message: str) -> bool:
    return "model" in message and any(
        n in message for n in ("unavailable", "not found", "does not exist")
    )


def _is_validation(error: BaseException, message: str) -> bool:
    if isinstance(error, json.JSONDecodeError):
        return False
    return any(n in message for n in ("invalid", "validation", "missing required"))


def _is_parsing(error: BaseException, message: str) -> bool:
    if isinstance(error, json.JSONDecodeError):
        return True
    return any(n in message for n in ("parse", "json", "unexpected token", "syntax"))


CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule(
        category=Category.NETWORK,
        predicate=_is_network,
        user_message="Unable to connect to the AI service. Please check your internet connection.",
        recovery_actions=(Action.CHECK_CONNECTION, Action.RETRY),
        retryable=True,
    ),
    ClassificationRule(
        category=Category.TIMEOUT,
        predicate=_is_timeout,
        user_message="The request took too long. Try generating with less content.",
        recovery_actions=(Action.RETRY_WITH_SMALLER_CONTEXT, Action.RETRY),
        retryable=True,
    ),
    ClassificationRule(
        category=Category.CONTEXT_LENGTH,
        predicate=_contains_any(
            "context length", "maximum context", "too many tokens", "token limit"
        ),
        user_message="The content is too large for the AI model. Try reducing the scope.",
        recovery_actions=(Action.RETRY_WITH_SMALLER_CONTEXT, Action.SWITCH_MODEL),
        retryable=True,
    ),
    ClassificationRule(
        category=Category.MODEL_UNAVAILABLE,
        predicate=_is_model_unavailable,
        user_message="The selected AI model is currently unavailable. Try a different model.",
        recovery_actions=(Action.SWITCH_MODEL, Action.RETRY),
        retryable=True,
    ),
    ClassificationRule(
        category=Category.QUOTA,
        predicate=_contains_any("quota", "billing", "insufficient", "credits"),
        user_message="AI usage quota exceeded. Please contact support or wait for quota reset.",
        recovery_actions=(Action.CONTACT_SUPPORT, Action.WAIT_AND_RETRY),
        retryable=False,
    ),
    ClassificationRule(
        category=Category.VALIDATION,
        predicate=_is_validation,
        user_message="There was a problem with the request. Please try again.",
        recovery_actions=(Action.MANUAL_EDIT, Action.RETRY),
        retryable=False,
    ),
    ClassificationRule(
        category=Category.PARSING,
        predicate=_is_parsing,
        user_message="The AI response could not be processed. Please try again.",
        recovery_actions=(Action.RETRY,),
        retryable=True,
    ),
]


def _classify_rate_limited(error: RateLimitedError) -> AIError:
    rate_limit_error = error.rate_limit_error
    if rate_limit_error.status == 429:
        return AIError(
            category=Category.RATE_LIMIT,
            message=str(error),
            user_message="The AI service is temporarily busy. The system will retry automatically.",
            recovery_actions=[Action.WAIT_AND_RETRY],
            retryable=True,
            suggested_wait_ms=rate_limit_error.retry_after_ms or DEFAULT_RATE_LIMIT_WAIT_MS,
            original_error=error,
        )

    # Gateway and availability failures (502, 503, 504)
    return AIError(
        category=Category.NETWORK,
        message=str(error),
        user_message="The AI service is temporarily unavailable. Please try again.",
        recovery_actions=[Action.RETRY, Action.CHECK_CONNECTION],
        retryable=True,
        original_error=error,
    )


def classify_by_status_code(
    status: int, error: Any, retry_after_ms: Optional[float] = None
) -> AIError:
    """Classify an error from its HTTP status code."""
    message = str(error)

    if status == 429:
        return AIError(
            category=Category.RATE_LIMIT,
            message=message,
            user_message="Too many requests. Please wait a moment before trying again.",
            recovery_actions=[Action.WAIT_AND_RETRY],
            retryable=True,
            suggested_wait_ms=retry_after_ms or DEFAULT_RATE_LIMIT_WAIT_MS,
            original_error=error,
        )

    if status in (401, 403):
        return AIError(
            category=Category.API,
            message=message,
            user_message="Authentication error. Please try logging in again.",
            recovery_actions=[Action.CONTACT_SUPPORT],
            retryable=False,
            original_error=error,
        )

    if status == 400:
        return AIError(
            category=Category.VALIDATION,
            message=message,
            user_message="Invalid request. Please check your input and try again.",
            recovery_actions=[Action.MANUAL_EDIT, Action.RETRY],
            retryable=False,
            original_error=error,
        )

    if status >= 500:
        return AIError(
            category=Category.API,
            message=message,
            user_message="The AI service is experiencing issues. Please try again later.",
            recovery_actions=[Action.RETRY, Action.WAIT_AND_RETRY],
            retryable=True,
            original_error=error,
        )

    return AIError(
        category=Category.API,
        message=message,
        user_message=f"Request failed with status {status}. Please try again.",
        recovery_actions=[Action.RETRY],
        retryable=True,
        original_error=error,
    )


def classify_ai_error(error: Any) -> AIError:
    """Classify an error into a category for appropriate handling.

    Args:
        error: Any raised value

    Returns:
        Classified error with user message and ranked recovery actions
    """
    if isinstance(error, RateLimitedError):
        return _classify_rate_limited(error)

    if isinstance(error, BaseException):
        message = str(error).lower()

        for rule in CLASSIFICATION_RULES:
            if rule.matches(error, message):
                return rule.build(error)

        info = extract_error_info(error)
        if info.status:
            return classify_by_status_code(info.status, error, info.retry_after_ms)

    return AIError(
        category=Category.UNKNOWN,
        message=str(error),
        user_message="An unexpected error occurred. Please try again.",
        recovery_actions=[Action.RETRY, Action.CONTACT_SUPPORT],
        retryable=True,
        original_error=error,
    )
