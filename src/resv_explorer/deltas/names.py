"""Resolution of lastModifiedByID values to display names.

Author ids in reservation histories are opaque UUIDs. A NameResolver
maps them to readable names for reporters; grouping never uses it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from resv_explorer.core.exceptions import NameMapError
from resv_explorer.deltas.models import NULL_AUTHOR

logger = logging.getLogger(__name__)


class NameResolver:
    """Maps author ids to display names.

    Attributes:
        mapping: Author id to name. The "(null)" key names operations
            that carry no author id.

    Example:
        >>> resolver = NameResolver({"5b56...": "John Doe"})
        >>> resolver.resolve("5b56...")
        'John Doe'
        >>> resolver.resolve("caf3...")
        'caf3...'
    """

    def __init__(self, mapping: dict[str, str] | None = None) -> None:
        """Initialize NameResolver.

        Args:
            mapping: Author id to display name.
        """
        self.mapping = {str(key): str(value) for key, value in (mapping or {}).items()}

    def __len__(self) -> int:
        return len(self.mapping)

    def resolve(self, author_id: str | None) -> str:
        """Return the display name for an author id.

        Falls back to the id itself, then to "(null)".
        """
        key = author_id or NULL_AUTHOR
        return self.mapping.get(key) or author_id or NULL_AUTHOR

    @classmethod
    def from_data(cls, data: Any) -> NameResolver:
        """Build a resolver from parsed mapping data.

        Raises:
            NameMapError: If data is not an object.
        """
        if not isinstance(data, dict):
            raise NameMapError(f"Name map must be an object, got {type(data).__name__}")
        return cls(data)

    @classmethod
    def from_file(cls, path: Path | str) -> NameResolver:
        """Load a resolver from a JSON or YAML mapping file.

        Args:
            path: Path to the mapping file (.json, .yaml or .yml).

        Returns:
            NameResolver for the mapping.

        Raises:
            NameMapError: If the file is missing, malformed, or not an object.
        """
        path = Path(path)
        if not path.exists():
            raise NameMapError(f"Name map file not found: {path}")

        content = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            import yaml

            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise NameMapError(f"Invalid YAML in {path}: {e}") from e
        else:
            try:
                data = json.loads(content or "{}")
            except json.JSONDecodeError as e:
                raise NameMapError(f"Invalid JSON in {path}: {e}") from e

        resolver = cls.from_data(data if data is not None else {})
        logger.debug(f"Loaded {len(resolver)} author names from {path}")
        return resolver
