"""Reporters module for resv-explorer.

This module provides output formatters for delta views and summaries:
- Console: Terminal output with optional colors
- JSON: Machine-readable format
- HTML: Standalone Delta/Patch Explorer page
"""

from __future__ import annotations

from resv_explorer.reporters.console import ConsoleReporter
from resv_explorer.reporters.html import HTMLReporter
from resv_explorer.reporters.json import JSONReporter

__all__ = [
    "ConsoleReporter",
    "HTMLReporter",
    "JSONReporter",
]
