"""Configuration management for Mend."""

import os
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .models import FallbackConfig, RateLimitConfig

# Load environment variables from .env file
load_dotenv()


def _parse_status_codes(raw: str) -> Tuple[int, ...]:
    try:
        return tuple(int(code) for code in raw.split(",") if code.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid MEND_RETRY_STATUS_CODES value '{raw}': {e}")


class GlobalConfig(BaseModel):
    """Global runtime configuration."""

    # Retry Defaults
    retry_max_retries: int = Field(
        default_factory=lambda: int(os.getenv("MEND_RETRY_MAX_RETRIES", "3"))
    )
    retry_base_delay_ms: float = Field(
        default_factory=lambda: float(os.getenv("MEND_RETRY_BASE_DELAY_MS", "1000"))
    )
    retry_max_delay_ms: float = Field(
        default_factory=lambda: float(os.getenv("MEND_RETRY_MAX_DELAY_MS", "30000"))
    )
    retry_status_codes: str = Field(
        default_factory=lambda: os.getenv("MEND_RETRY_STATUS_CODES", "429,502,503,504")
    )

    # Fallback Defaults
    fallback_enabled: bool = Field(
        default_factory=lambda: os.getenv("MEND_FALLBACK_ENABLED", "true").lower()
        == "true"
    )
    fallback_max_attempts: int = Field(
        default_factory=lambda: int(os.getenv("MEND_FALLBACK_MAX_ATTEMPTS", "2"))
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("MEND_LOG_LEVEL", "INFO")
    )
    log_format: str = Field(
        default_factory=lambda: os.getenv(
            "MEND_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def rate_limit_config(self) -> RateLimitConfig:
        """Build the default retry configuration.

        Raises:
            ConfigurationError: If the environment holds invalid retry settings
        """
        try:
            return RateLimitConfig(
                max_retries=self.retry_max_retries,
                base_delay_ms=self.retry_base_delay_ms,
                max_delay_ms=self.retry_max_delay_ms,
                retry_status_codes=_parse_status_codes(self.retry_status_codes),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid retry configuration: {e}")

    def fallback_config(self) -> FallbackConfig:
        """Build the default fallback configuration.

        Raises:
            ConfigurationError: If the environment holds invalid fallback settings
        """
        try:
            return FallbackConfig(
                enable_fallback=self.fallback_enabled,
                max_fallback_attempts=self.fallback_max_attempts,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid fallback configuration: {e}")


# Global configuration instance
config = GlobalConfig()


def get_config() -> GlobalConfig:
    """Get global configuration instance."""
    return config


def reload_config() -> GlobalConfig:
    """Reload configuration from environment."""
    load_dotenv(override=True)
    global config
    config = GlobalConfig()
    return config
