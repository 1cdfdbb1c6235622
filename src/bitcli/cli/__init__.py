"""CLI for bitcli."""

from bitcli.cli.main import app, main


__all__ = ["app", "main"]
