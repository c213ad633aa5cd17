"""CLI module for resv-explorer.

This module provides the command-line interface using Typer.
"""

from __future__ import annotations

from resv_explorer.cli.main import app

__all__ = ["app"]
