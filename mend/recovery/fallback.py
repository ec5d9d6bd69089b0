"""Model fallback across AI providers.

When a model keeps failing with an error that another provider would not
share (rate limits, outages, quota), the call is repeated against an
equivalent model from a different provider.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple, TypeVar

from mend.core.config import get_config
from mend.core.exceptions import FallbackExhaustedError
from mend.core.models import (
    FallbackAttemptError,
    FallbackConfig,
    FallbackResult,
    ModelInfo,
)
from mend.core.types import FallbackErrorType, ProviderType

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnFallback = Callable[[str, str, BaseException, int], Any]

OPENAI_MODELS: List[ModelInfo] = [
    ModelInfo(id="gpt-4-turbo", name="GPT-4 Turbo", provider=ProviderType.OPENAI, context_window=128000),
    ModelInfo(id="gpt-4", name="GPT-4", provider=ProviderType.OPENAI, context_window=8192),
    ModelInfo(id="gpt-3.5-turbo", name="GPT-3.5 Turbo", provider=ProviderType.OPENAI, context_window=16385),
    ModelInfo(id="gpt-3.5-turbo-16k", name="GPT-3.5 Turbo 16K", provider=ProviderType.OPENAI, context_window=16385),
]

ANTHROPIC_MODELS: List[ModelInfo] = [
    ModelInfo(id="claude-3-opus-20240229", name="Claude 3 Opus", provider=ProviderType.ANTHROPIC, context_window=200000),
    ModelInfo(id="claude-3-sonnet-20240229", name="Claude 3 Sonnet", provider=ProviderType.ANTHROPIC, context_window=200000),
    ModelInfo(id="claude-3-haiku-20240307", name="Claude 3 Haiku", provider=ProviderType.ANTHROPIC, context_window=200000),
]

GEMINI_MODELS: List[ModelInfo] = [
    ModelInfo(id="gemini-1.5-pro", name="Gemini 1.5 Pro", provider=ProviderType.GEMINI, context_window=1000000),
    ModelInfo(id="gemini-1.5-flash", name="Gemini 1.5 Flash", provider=ProviderType.GEMINI, context_window=1000000),
    ModelInfo(id="gemini-pro", name="Gemini Pro", provider=ProviderType.GEMINI, context_window=32760),
]

ALL_MODELS: List[ModelInfo] = OPENAI_MODELS + ANTHROPIC_MODELS + GEMINI_MODELS

# Cross-provider equivalents, grouped by capability tier
MODEL_EQUIVALENCES = {
    # High-capability models
    "gpt-4-turbo": ["claude-3-opus-20240229", "gemini-1.5-pro"],
    "gpt-4": ["claude-3-opus-20240229", "gemini-1.5-pro"],
    "claude-3-opus-20240229": ["gpt-4-turbo", "gemini-1.5-pro"],
    "gemini-1.5-pro": ["gpt-4-turbo", "claude-3-opus-20240229"],
    # Mid-capability models
    "gpt-3.5-turbo": ["claude-3-sonnet-20240229", "gemini-1.5-flash"],
    "gpt-3.5-turbo-16k": ["claude-3-sonnet-20240229", "gemini-1.5-flash"],
    "claude-3-sonnet-20240229": ["gpt-3.5-turbo-16k", "gemini-1.5-flash"],
    "gemini-1.5-flash": ["gpt-3.5-turbo-16k", "claude-3-sonnet-20240229"],
    # Fast/efficient models
    "claude-3-haiku-20240307": ["gpt-3.5-turbo", "gemini-1.5-flash"],
    "gemini-pro": ["gpt-3.5-turbo", "claude-3-haiku-20240307"],
}

_PROVIDER_PREFIXES = {
    "gpt-": ProviderType.OPENAI,
    "claude-": ProviderType.ANTHROPIC,
    "gemini-": ProviderType.GEMINI,
}


def get_model_info(model_id: str) -> Optional[ModelInfo]:
    """Look up a model in the catalogue."""
    return next((m for m in ALL_MODELS if m.id == model_id), None)


def get_provider_for_model(model_id: str) -> Optional[ProviderType]:
    """Resolve the provider serving a model, by catalogue or id prefix."""
    info = get_model_info(model_id)
    if info is not None:
        return info.provider
    for prefix, provider in _PROVIDER_PREFIXES.items():
        if model_id.startswith(prefix):
            return provider
    return None


def get_fallback_models(
    model_id: str, config: Optional[FallbackConfig] = None
) -> List[str]:
    """Get fallback models for a given model, best candidate first.

    Direct equivalences are used when known. Otherwise models from other
    providers with at least half the context window are ranked by context
    window, then by provider preference.
    """
    if model_id in MODEL_EQUIVALENCES:
        return list(MODEL_EQUIVALENCES[model_id])

    current = get_model_info(model_id)
    if current is None:
        return []

    order = list((config or FallbackConfig()).fallback_order)
    candidates = [
        m
        for m in ALL_MODELS
        if m.provider != current.provider
        and m.provider in order
        and m.context_window >= current.context_window * 0.5
    ]
    candidates.sort(key=lambda m: (-m.context_window, order.index(m.provider)))
    return [m.id for m in candidates]


def should_fallback(
    error: BaseException, config: Optional[FallbackConfig] = None
) -> Tuple[bool, Optional[FallbackErrorType]]:
    """Determine if an error should trigger fallback.

    Returns:
        Whether to fall back, and the detected error type (None if unrecognized)
    """
    config = config or FallbackConfig()
    message = str(error).lower()
    name = type(error).__name__.lower()

    if "rate limit" in message or "429" in message or "ratelimit" in name:
        error_type = FallbackErrorType.RATE_LIMIT
    elif any(s in message for s in ("500", "502", "503", "internal server")):
        error_type = FallbackErrorType.SERVER_ERROR
    elif "timeout" in message or "timed out" in message or isinstance(
        error, (TimeoutError, asyncio.TimeoutError)
    ):
        error_type = FallbackErrorType.TIMEOUT
    elif "model" in message and any(
        s in message for s in ("not found", "does not exist", "unavailable")
    ):
        error_type = FallbackErrorType.MODEL_UNAVAILABLE
    elif any(s in message for s in ("quota", "insufficient", "exceeded")):
        error_type = FallbackErrorType.QUOTA_EXCEEDED
    elif any(s in message for s in ("network", "fetch", "connection")) or isinstance(
        error, ConnectionError
    ):
        error_type = FallbackErrorType.NETWORK
    else:
        return False, None

    return error_type in config.fallback_on_errors, error_type


async def complete_with_fallback(
    call: Callable[[str], Awaitable[T]],
    model: str,
    config: Optional[FallbackConfig] = None,
    on_fallback: Optional[OnFallback] = None,
) -> FallbackResult[T]:
    """Run a model call, falling back to equivalent models on failure.

    Args:
        call: Async function taking a model id
        model: Preferred model id
        config: Fallback configuration, defaults from environment
        on_fallback: Called as ``on_fallback(from_model, to_model, error, attempt)``
            before switching models; may be sync or async

    Returns:
        Result from the first model that succeeded

    Raises:
        Exception: The original error when it should not trigger fallback
        FallbackExhaustedError: If every model tried failed
    """
    config = config or get_config().fallback_config()
    errors: List[FallbackAttemptError] = []

    models_to_try = [model]
    if config.enable_fallback:
        models_to_try.extend(get_fallback_models(model, config))

    max_tries = min(len(models_to_try), config.max_fallback_attempts + 1)

    for attempt in range(max_tries):
        current_model = models_to_try[attempt]
        provider = get_provider_for_model(current_model)

        if provider is None:
            logger.warning(f"No provider found for model: {current_model}")
            continue

        logger.info(
            f"Attempting completion with {current_model} "
            f"(attempt {attempt + 1}/{max_tries}, provider={provider.value})"
        )

        try:
            data = await call(current_model)
        except Exception as e:
            errors.append(FallbackAttemptError(model=current_model, error=e))
            logger.warning(f"Error with {current_model}: {type(e).__name__}: {e}")

            fallback, error_type = should_fallback(e, config)
            if not fallback or not config.enable_fallback:
                raise

            if attempt < max_tries - 1:
                next_model = models_to_try[attempt + 1]
                logger.warning(
                    f"Falling back from {current_model} to {next_model} "
                    f"(error_type={error_type.value if error_type else None})"
                )
                if on_fallback is not None:
                    outcome = on_fallback(current_model, next_model, e, attempt + 1)
                    if inspect.isawaitable(outcome):
                        await outcome
            continue

        if attempt > 0:
            logger.info(
                f"Fallback succeeded with {current_model} "
                f"(original={model}, attempts={attempt + 1})"
            )

        return FallbackResult(
            data=data,
            model=current_model,
            original_model=model,
            used_fallback=attempt > 0,
            fallback_attempts=attempt,
            errors=errors,
        )

    exhausted = FallbackExhaustedError(model, errors)
    logger.error(str(exhausted))
    if errors:
        raise exhausted from errors[-1].error
    raise exhausted


def get_fallback_info(
    model_id: str,
) -> Tuple[Optional[ModelInfo], List[Tuple[ModelInfo, int]]]:
    """Get a model's catalogue entry and its fallbacks with 1-based priorities."""
    fallbacks: List[Tuple[ModelInfo, int]] = []
    for fallback_id in get_fallback_models(model_id):
        info = get_model_info(fallback_id)
        if info is not None:
            fallbacks.append((info, len(fallbacks) + 1))
    return get_model_info(model_id), fallbacks
