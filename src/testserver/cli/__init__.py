"""Command line interface."""

from testserver.cli.main import cli

__all__ = ["cli"]
