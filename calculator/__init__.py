"""Command-line front end: parses card labels and prints showdowns or odds."""

from .cli import build_parser, run

__all__ = ["build_parser", "run"]
