"""CLI package for testboard."""

from testboard.cli.app import app, main

__all__ = ["app", "main"]
