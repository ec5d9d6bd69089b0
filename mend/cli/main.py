"""Command-line interface for Mend."""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from mend import __version__
from mend.core.config import get_config
from mend.core.exceptions import ConfigurationError, RateLimitedError
from mend.core.models import RateLimitConfig
from mend.recovery import classify_ai_error, get_fallback_info, get_recovery_options
from mend.resilience import (
    calculate_backoff_delay,
    create_rate_limit_error,
    parse_retry_after,
)

console = Console()


def _configure_logging() -> None:
    settings = get_config()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)


@click.group()
@click.version_option(version=__version__, prog_name="mend")
def cli() -> None:
    """Mend - Retry, backoff and error recovery for AI service calls."""
    _configure_logging()


@cli.command()
@click.argument("message")
@click.option("--status", type=int, default=None, help="Treat as rate limited with this HTTP status.")
@click.option("--retry-after", default=None, help="Retry-After value (seconds or HTTP date).")
def classify(message: str, status: Optional[int], retry_after: Optional[str]) -> None:
    """Classify an error message and show recovery options.

    Example:
        mend classify "Request timed out"
        mend classify "Too many requests" --status 429 --retry-after 30
    """
    if status is not None:
        rate_limit_error = create_rate_limit_error(status, message, parse_retry_after(retry_after))
        error: Exception = RateLimitedError(message, rate_limit_error, attempts=1, total_delay_ms=0)
    else:
        error = RuntimeError(message)

    ai_error = classify_ai_error(error)

    retryable = "[green]yes[/green]" if ai_error.retryable else "[red]no[/red]"
    console.print(f"[cyan]Category:[/cyan] {ai_error.category.value}")
    console.print(f"[cyan]Retryable:[/cyan] {retryable}")
    console.print(f"[cyan]Message:[/cyan] {ai_error.user_message}")
    if ai_error.suggested_wait_ms is not None:
        console.print(f"[cyan]Suggested wait:[/cyan] {ai_error.suggested_wait_ms / 1000:.0f}s")

    table = Table(title="Recovery options")
    table.add_column("Action")
    table.add_column("Label")
    table.add_column("Description")
    for option in get_recovery_options(ai_error):
        marker = " *" if option.is_primary else ""
        table.add_row(f"{option.action.value}{marker}", option.label, option.description)
    console.print(table)


@cli.command()
@click.option("--attempts", type=int, default=None, help="Number of retries to show.")
@click.option("--base-delay-ms", type=float, default=None, help="Delay before the first retry.")
@click.option("--max-delay-ms", type=float, default=None, help="Upper bound on any delay.")
@click.option("--retry-after", default=None, help="Server Retry-After value to honor.")
def backoff(
    attempts: Optional[int],
    base_delay_ms: Optional[float],
    max_delay_ms: Optional[float],
    retry_after: Optional[str],
) -> None:
    """Show the backoff delay schedule.

    Example:
        mend backoff --attempts 5 --base-delay-ms 500
    """
    try:
        defaults = get_config().rate_limit_config()
        cfg = RateLimitConfig(
            max_retries=attempts if attempts is not None else defaults.max_retries,
            base_delay_ms=base_delay_ms if base_delay_ms is not None else defaults.base_delay_ms,
            max_delay_ms=max_delay_ms if max_delay_ms is not None else defaults.max_delay_ms,
            retry_status_codes=defaults.retry_status_codes,
        )
    except (ConfigurationError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    retry_after_ms = parse_retry_after(retry_after)

    table = Table(title="Backoff schedule")
    table.add_column("Retry", justify="right")
    table.add_column("Delay (ms)", justify="right")
    table.add_column("Cumulative (ms)", justify="right")

    total = 0.0
    for attempt in range(cfg.max_retries):
        delay = calculate_backoff_delay(
            attempt, cfg.base_delay_ms, cfg.max_delay_ms, retry_after_ms
        )
        total += delay
        table.add_row(str(attempt + 1), f"{delay:.0f}", f"{total:.0f}")

    console.print(table)


@cli.command("retry-after")
@click.argument("value")
def retry_after_cmd(value: str) -> None:
    """Parse a Retry-After header value.

    Example:
        mend retry-after 30
        mend retry-after "Wed, 21 Oct 2026 07:28:00 GMT"
    """
    delay_ms = parse_retry_after(value)
    if delay_ms is None:
        console.print("[yellow]absent[/yellow]")
        sys.exit(1)
    console.print(f"{delay_ms:.0f}ms")


@cli.command()
@click.argument("model")
def fallbacks(model: str) -> None:
    """Show the fallback chain for a model.

    Example:
        mend fallbacks gpt-4-turbo
    """
    info, chain = get_fallback_info(model)
    if info is None:
        console.print(f"[red]Unknown model: {model}[/red]")
        sys.exit(1)

    console.print(
        f"[green]{info.name}[/green] ({info.provider.value}, "
        f"{info.context_window} tokens)"
    )
    table = Table(title="Fallback models")
    table.add_column("Priority", justify="right")
    table.add_column("Model")
    table.add_column("Provider")
    for fallback, priority in chain:
        table.add_row(str(priority), fallback.id, fallback.provider.value)
    console.print(table)


@cli.command()
def version() -> None:
    """Show Mend version."""
    console.print(f"Mend version {__version__}")


if __name__ == "__main__":
    cli()
