"""
CLI layer for tendbook.

Provides a Typer application with sub-commands that delegate to the
operations layer (``tendbook.ops``).  This package handles only terminal
transport: argument parsing, coloured output, and table formatting.

Entry point::

    tendbook --help
"""

from tendbook.cli.app import app

__all__ = ["app"]
