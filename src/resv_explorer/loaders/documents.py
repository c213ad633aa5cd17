"""Load API response documents from files or streams.

Responses are plain JSON bodies as saved from the API client. A UTF-8
byte order mark, which some clients prepend on export, is tolerated.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, TextIO

from resv_explorer.core.exceptions import DocumentLoadError

STDIN_MARKER = "-"


def parse_document(content: str, source: str = "<string>") -> Any:
    """Parse a JSON response body.

    Args:
        content: Raw response text.
        source: Name used in error messages.

    Returns:
        The parsed document.

    Raises:
        DocumentLoadError: If the content is empty or not valid JSON.
    """
    content = content.lstrip("\ufeff")
    if not content.strip():
        raise DocumentLoadError(f"Empty document: {source}")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"Invalid JSON in {source}: {e}") from e


def load_document(path: str | Path, stdin: TextIO | None = None) -> Any:
    """Load a JSON response document.

    Args:
        path: Path to the JSON file, or "-" to read standard input.
        stdin: Stream used for "-". Defaults to sys.stdin.

    Returns:
        The parsed document.

    Raises:
        DocumentLoadError: If the file is missing, unreadable, or invalid.

    Example:
        >>> document = load_document("responses/history-4711.json")
        >>> len(document["reservationsHistories"])
        12
    """
    if str(path) == STDIN_MARKER:
        return parse_document((stdin or sys.stdin).read(), "<stdin>")

    path = Path(path)
    if not path.exists():
        raise DocumentLoadError(f"Document not found: {path}")
    if not path.is_file():
        raise DocumentLoadError(f"Document path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Cannot read {path}: {e}") from e

    return parse_document(content, str(path))
