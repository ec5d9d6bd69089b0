"""Unit tests for cross-provider model fallback."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mend.core.exceptions import FallbackExhaustedError, RateLimitedError
from mend.core.models import FallbackConfig, RateLimitError
from mend.core.types import FallbackErrorType, ProviderType
from mend.recovery import fallback
from mend.recovery.fallback import (
    ALL_MODELS,
    complete_with_fallback,
    get_fallback_info,
    get_fallback_models,
    get_model_info,
    get_provider_for_model,
    should_fallback,
)


class TestModelCatalogue:
    def test_known_models(self):
        assert get_model_info("gpt-4-turbo").context_window == 128000
        assert get_model_info("claude-3-opus-20240229").provider == ProviderType.ANTHROPIC
        assert get_model_info("gemini-1.5-pro").context_window == 1000000

    def test_catalogue_covers_all_providers(self):
        providers = {m.provider for m in ALL_MODELS}
        assert providers == set(ProviderType)

    def test_provider_by_prefix(self):
        assert get_provider_for_model("gpt-4o") == ProviderType.OPENAI
        assert get_provider_for_model("claude-2.1") == ProviderType.ANTHROPIC
        assert get_provider_for_model("gemini-ultra") == ProviderType.GEMINI
        assert get_provider_for_model("llama-3-70b") is None


class TestGetFallbackModels:
    def test_gpt_4_turbo(self):
        fallbacks = get_fallback_models("gpt-4-turbo")

        assert "claude-3-opus-20240229" in fallbacks
        assert "gemini-1.5-pro" in fallbacks

    def test_gpt_35_turbo(self):
        fallbacks = get_fallback_models("gpt-3.5-turbo")

        assert "claude-3-sonnet-20240229" in fallbacks
        assert "gemini-1.5-flash" in fallbacks

    def test_unknown_model(self):
        assert get_fallback_models("unknown-model") == []

    def test_context_window_ranking_without_equivalences(self):
        """Other providers ranked by context window when no equivalence exists."""
        with patch.dict(fallback.MODEL_EQUIVALENCES, clear=True):
            fallbacks = get_fallback_models("gpt-4")

        assert fallbacks[0] == "gemini-1.5-pro"
        assert fallbacks[-1] == "gemini-pro"
        assert not any(m.startswith("gpt-") for m in fallbacks)

    def test_fallback_order_limits_providers(self):
        config = FallbackConfig(fallback_order=(ProviderType.OPENAI, ProviderType.ANTHROPIC))

        with patch.dict(fallback.MODEL_EQUIVALENCES, clear=True):
            fallbacks = get_fallback_models("gpt-4", config)

        assert fallbacks == [
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
            "claude-3-haiku-20240307",
        ]


class TestShouldFallback:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Rate limit exceeded", FallbackErrorType.RATE_LIMIT),
            ("HTTP error! status: 429", FallbackErrorType.RATE_LIMIT),
            ("HTTP 500 Internal Server Error", FallbackErrorType.SERVER_ERROR),
            ("503 Service Unavailable", FallbackErrorType.SERVER_ERROR),
            ("Request timeout", FallbackErrorType.TIMEOUT),
            ("Model gpt-5 not found", FallbackErrorType.MODEL_UNAVAILABLE),
            ("Quota exceeded", FallbackErrorType.QUOTA_EXCEEDED),
            ("Network error", FallbackErrorType.NETWORK),
        ],
    )
    def test_detected_error_types(self, message, expected):
        assert should_fallback(Exception(message)) == (True, expected)

    def test_rate_limited_error_class(self):
        error = RateLimitedError(
            "Please slow down",
            RateLimitError(status=429, message="", is_rate_limited=True),
            attempts=4,
            total_delay_ms=7000,
        )

        assert should_fallback(error) == (True, FallbackErrorType.RATE_LIMIT)

    def test_validation_error_does_not_fallback(self):
        assert should_fallback(Exception("Invalid input")) == (False, None)

    def test_respects_fallback_on_errors(self):
        config = FallbackConfig(fallback_on_errors=(FallbackErrorType.SERVER_ERROR,))

        assert should_fallback(Exception("Rate limit exceeded"), config)[0] is False
        assert should_fallback(Exception("500 Internal Server Error"), config)[0] is True


class TestCompleteWithFallback:
    @pytest.mark.asyncio
    async def test_success_without_fallback(self):
        call = AsyncMock(return_value="completion")

        result = await complete_with_fallback(call, "gpt-4-turbo", FallbackConfig())

        assert result.data == "completion"
        assert result.model == "gpt-4-turbo"
        assert result.used_fallback is False
        assert result.original_model == "gpt-4-turbo"
        assert result.fallback_attempts == 0
        assert result.errors == []
        call.assert_awaited_once_with("gpt-4-turbo")

    @pytest.mark.asyncio
    async def test_falls_back_on_rate_limit(self):
        error = Exception("Rate limit exceeded")
        call = AsyncMock(side_effect=[error, "completion"])
        on_fallback = MagicMock()

        result = await complete_with_fallback(
            call, "gpt-4-turbo", FallbackConfig(), on_fallback=on_fallback
        )

        assert result.data == "completion"
        assert result.model == "claude-3-opus-20240229"
        assert result.used_fallback is True
        assert result.fallback_attempts == 1
        assert len(result.errors) == 1
        assert result.errors[0].model == "gpt-4-turbo"
        assert result.errors[0].error is error
        on_fallback.assert_called_once_with(
            "gpt-4-turbo", "claude-3-opus-20240229", error, 1
        )

    @pytest.mark.asyncio
    async def test_async_on_fallback(self):
        call = AsyncMock(side_effect=[Exception("503 Service Unavailable"), "ok"])
        on_fallback = AsyncMock()

        await complete_with_fallback(call, "gpt-4", FallbackConfig(), on_fallback=on_fallback)

        on_fallback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_raises_when_all_fallbacks_fail(self):
        last_error = Exception("Rate limit exceeded again")
        call = AsyncMock(
            side_effect=[Exception("Rate limit exceeded"), Exception("timeout"), last_error]
        )

        with pytest.raises(FallbackExhaustedError) as exc_info:
            await complete_with_fallback(call, "gpt-4-turbo", FallbackConfig())

        assert len(exc_info.value.errors) == 3
        assert exc_info.value.original_model == "gpt-4-turbo"
        assert exc_info.value.__cause__ is last_error

    @pytest.mark.asyncio
    async def test_no_fallback_when_disabled(self):
        call = AsyncMock(side_effect=Exception("Rate limit exceeded"))

        with pytest.raises(Exception, match="Rate limit exceeded"):
            await complete_with_fallback(
                call, "gpt-4-turbo", FallbackConfig(enable_fallback=False)
            )

        assert call.await_count == 1

    @pytest.mark.asyncio
    async def test_no_fallback_on_validation_error(self):
        call = AsyncMock(side_effect=ValueError("Invalid request"))

        with pytest.raises(ValueError, match="Invalid request"):
            await complete_with_fallback(call, "gpt-4-turbo", FallbackConfig())

        assert call.await_count == 1

    @pytest.mark.asyncio
    async def test_respects_max_fallback_attempts(self):
        call = AsyncMock(side_effect=Exception("Rate limit exceeded"))

        with pytest.raises(FallbackExhaustedError):
            await complete_with_fallback(
                call, "gpt-4-turbo", FallbackConfig(max_fallback_attempts=1)
            )

        assert call.await_count == 2

    @pytest.mark.asyncio
    async def test_skips_models_without_provider(self):
        call = AsyncMock(return_value="never")

        with pytest.raises(FallbackExhaustedError) as exc_info:
            await complete_with_fallback(call, "mystery-model", FallbackConfig())

        assert exc_info.value.errors == []
        call.assert_not_awaited()


class TestGetFallbackInfo:
    def test_known_model(self):
        model, fallbacks = get_fallback_info("gpt-4-turbo")

        assert model.id == "gpt-4-turbo"
        assert len(fallbacks) > 0
        assert fallbacks[0][1] == 1

    def test_priorities_ascend(self):
        _, fallbacks = get_fallback_info("claude-3-opus-20240229")

        priorities = [priority for _, priority in fallbacks]
        assert priorities == sorted(priorities)
        assert priorities == list(range(1, len(priorities) + 1))

    def test_unknown_model(self):
        model, fallbacks = get_fallback_info("unknown-model")

        assert model is None
        assert fallbacks == []
