"""Unit tests for the command-line interface."""

from click.testing import CliRunner

from mend import __version__
from mend.cli.main import cli


class TestClassifyCommand:
    def test_classifies_message(self):
        result = CliRunner().invoke(cli, ["classify", "Request timed out"])

        assert result.exit_code == 0
        assert "Category: timeout" in result.output
        assert "Retryable: yes" in result.output

    def test_non_retryable_message(self):
        result = CliRunner().invoke(cli, ["classify", "Quota exceeded"])

        assert result.exit_code == 0
        assert "Category: quota" in result.output
        assert "Retryable: no" in result.output

    def test_rate_limited_status(self):
        result = CliRunner().invoke(
            cli, ["classify", "Too many requests", "--status", "429", "--retry-after", "30"]
        )

        assert result.exit_code == 0
        assert "Category: rate_limit" in result.output
        assert "Suggested wait: 30s" in result.output


class TestBackoffCommand:
    def test_schedule_with_retry_after(self):
        result = CliRunner().invoke(
            cli, ["backoff", "--attempts", "3", "--base-delay-ms", "100", "--retry-after", "1"]
        )

        assert result.exit_code == 0
        assert "Backoff schedule" in result.output
        assert "3000" in result.output

    def test_invalid_delays(self):
        result = CliRunner().invoke(
            cli, ["backoff", "--base-delay-ms", "5000", "--max-delay-ms", "100"]
        )

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_zero_base_delay_is_rejected(self):
        result = CliRunner().invoke(cli, ["backoff", "--base-delay-ms", "0"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestRetryAfterCommand:
    def test_seconds(self):
        result = CliRunner().invoke(cli, ["retry-after", "30"])

        assert result.exit_code == 0
        assert "30000ms" in result.output

    def test_invalid(self):
        result = CliRunner().invoke(cli, ["retry-after", "garbage"])

        assert result.exit_code == 1
        assert "absent" in result.output


class TestFallbacksCommand:
    def test_known_model(self):
        result = CliRunner().invoke(cli, ["fallbacks", "gpt-4-turbo"])

        assert result.exit_code == 0
        assert "claude-3-opus-20240229" in result.output
        assert "gemini-1.5-pro" in result.output

    def test_unknown_model(self):
        result = CliRunner().invoke(cli, ["fallbacks", "unknown-model"])

        assert result.exit_code == 1
        assert "Unknown model" in result.output


class TestVersion:
    def test_version_command(self):
        result = CliRunner().invoke(cli, ["version"])

        assert result.exit_code == 0
        assert f"Mend version {__version__}" in result.output

    def test_version_option(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
