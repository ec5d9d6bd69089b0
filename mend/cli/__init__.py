"""Command-line interface for Mend."""

from .main import cli

__all__ = ["cli"]
