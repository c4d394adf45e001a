"""CLI exports.

This package exposes `cli` and `main` from `root.py` so that
`python -m fsearch` and the console entry point share one command.
"""

from .root import cli, main

__all__ = ["cli", "main"]
