"""Unit tests for environment-driven configuration."""

import pytest

from mend.core.config import GlobalConfig, get_config, reload_config
from mend.core.exceptions import ConfigurationError
from mend.core.models import FallbackConfig, RateLimitConfig

ENV_VARS = [
    "MEND_RETRY_MAX_RETRIES",
    "MEND_RETRY_BASE_DELAY_MS",
    "MEND_RETRY_MAX_DELAY_MS",
    "MEND_RETRY_STATUS_CODES",
    "MEND_FALLBACK_ENABLED",
    "MEND_FALLBACK_MAX_ATTEMPTS",
    "MEND_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestGlobalConfig:
    def test_defaults(self, clean_env):
        settings = GlobalConfig()

        assert settings.retry_max_retries == 3
        assert settings.retry_base_delay_ms == 1000
        assert settings.retry_max_delay_ms == 30000
        assert settings.retry_status_codes == "429,502,503,504"
        assert settings.fallback_enabled is True
        assert settings.fallback_max_attempts == 2
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("MEND_RETRY_MAX_RETRIES", "5")
        clean_env.setenv("MEND_RETRY_BASE_DELAY_MS", "250")
        clean_env.setenv("MEND_RETRY_STATUS_CODES", "429, 503")
        clean_env.setenv("MEND_FALLBACK_ENABLED", "false")

        settings = GlobalConfig()
        rate_limit = settings.rate_limit_config()

        assert isinstance(rate_limit, RateLimitConfig)
        assert rate_limit.max_retries == 5
        assert rate_limit.base_delay_ms == 250
        assert rate_limit.retry_status_codes == (429, 503)
        assert settings.fallback_config().enable_fallback is False

    def test_invalid_status_codes(self, clean_env):
        clean_env.setenv("MEND_RETRY_STATUS_CODES", "429,abc")

        with pytest.raises(ConfigurationError):
            GlobalConfig().rate_limit_config()

    def test_invalid_delays(self, clean_env):
        clean_env.setenv("MEND_RETRY_BASE_DELAY_MS", "5000")
        clean_env.setenv("MEND_RETRY_MAX_DELAY_MS", "100")

        with pytest.raises(ConfigurationError):
            GlobalConfig().rate_limit_config()

    def test_invalid_fallback_attempts(self, clean_env):
        clean_env.setenv("MEND_FALLBACK_MAX_ATTEMPTS", "-2")

        with pytest.raises(ConfigurationError):
            GlobalConfig().fallback_config()

    def test_fallback_config(self, clean_env):
        config = GlobalConfig().fallback_config()

        assert isinstance(config, FallbackConfig)
        assert config.max_fallback_attempts == 2


class TestReloadConfig:
    def test_reload_replaces_global(self):
        before = get_config()

        reloaded = reload_config()

        assert reloaded is not before
        assert get_config() is reloaded
