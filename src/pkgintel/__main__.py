"""
CLI entry point for running pkgintel as a module.

Usage: python -m pkgintel [OPTIONS] COMMAND [ARGS]...
"""

from pkgintel.cli.main import cli

if __name__ == "__main__":
    cli()
