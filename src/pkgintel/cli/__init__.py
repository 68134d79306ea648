"""
Command-line interface for pkgintel.

Provides Click-based CLI commands for each package intelligence operation.
"""

from pkgintel.cli.main import cli

__all__ = ["cli"]
