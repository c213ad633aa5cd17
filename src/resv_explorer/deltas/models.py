"""Data models for reservation history deltas.

This module provides the annotated patch operation record produced by
the extractor, the grouping and filter configuration values, and the
derived group, session and bucket structures rendered by reporters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from resv_explorer.core.exceptions import ConfigurationError
from resv_explorer.core.timestamps import BucketGranularity

# Stands in for a missing lastModifiedByID in filters and counts
NULL_AUTHOR = "(null)"
NO_SESSION_KEY = "(no session)"


class _Unset:
    """Marker for a fromValue/value key that is absent from the source object."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class PatchOperation:
    """A single field-level change found in a change-log document.

    Attributes:
        op: Operation verb (replace, add, remove, ...).
        path: Slash-delimited pointer into the patched domain object.
        pointer: Location of the record in the source document.
        sequence: Ordinal among matched records in traversal order.
        from_value: Prior value, or UNSET when the key was absent.
        value: New value, or UNSET when the key was absent.
        last_modified: Raw lastModified of the enclosing history entry.
        last_modified_ms: Parsed epoch milliseconds of last_modified.
        last_modified_by_id: Author id of the enclosing history entry.
    """

    op: str
    path: str
    pointer: str
    sequence: int
    from_value: Any = UNSET
    value: Any = UNSET
    last_modified: str | None = None
    last_modified_ms: int | None = None
    last_modified_by_id: str | None = None

    @property
    def author_key(self) -> str:
        """Author id, or the null-author sentinel when missing."""
        return self.last_modified_by_id or NULL_AUTHOR

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase JSON form used by the API.

        Absent fromValue/value keys are omitted rather than emitted as null.
        """
        data: dict[str, Any] = {
            "sequence": self.sequence,
            "pointer": self.pointer,
            "op": self.op,
            "path": self.path,
        }
        if self.from_value is not UNSET:
            data["fromValue"] = self.from_value
        if self.value is not UNSET:
            data["value"] = self.value
        data["lastModified"] = self.last_modified
        data["lastModifiedTimestampMs"] = self.last_modified_ms
        data["lastModifiedByID"] = self.last_modified_by_id
        return data


@dataclass
class SignatureGroup:
    """Patch operations that share one signature key.

    Attributes:
        key: Strict or loose signature.
        items: Members in first-appearance order.
    """

    key: str
    items: list[PatchOperation] = field(default_factory=list)

    @property
    def first(self) -> PatchOperation:
        """The earliest member, which represents the group."""
        return self.items[0]

    @property
    def first_sequence(self) -> int:
        """Minimum sequence among the members."""
        return min(item.sequence for item in self.items)

    @property
    def op(self) -> str:
        return self.first.op

    @property
    def path(self) -> str:
        return self.first.path

    @property
    def from_value(self) -> Any:
        return self.first.from_value

    @property
    def value(self) -> Any:
        return self.first.value

    @property
    def last_modified(self) -> str | None:
        return self.first.last_modified

    @property
    def last_modified_by_id(self) -> str | None:
        return self.first.last_modified_by_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "key": self.key,
            "count": len(self.items),
            "firstSequence": self.first_sequence,
            "occurrences": [{"sequence": item.sequence, "pointer": item.pointer} for item in self.items],
        }


@dataclass
class Session:
    """A batch of patch operations sharing one exact lastModified.

    With session grouping disabled, a single catch-all session holds
    every filtered operation under the ``(no session)`` key.

    Attributes:
        key: Literal lastModified, or a sentinel.
        items: Members in appearance order.
        timestamp_ms: Parsed lastModified used for time sorting.
        first_sequence: Sequence of the first member.
        last_modified: Raw lastModified shared by the members.
        last_modified_by_id: Author id of the first member.
        groups: Signature groups built from items.
    """

    key: str
    first_sequence: int
    timestamp_ms: int | None = None
    last_modified: str | None = None
    last_modified_by_id: str | None = None
    items: list[PatchOperation] = field(default_factory=list)
    groups: list[SignatureGroup] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "key": self.key,
            "lastModified": self.last_modified,
            "timestampMs": self.timestamp_ms,
            "lastModifiedByID": self.last_modified_by_id,
            "firstSequence": self.first_sequence,
            "count": len(self.items),
            "groups": [group.to_dict() for group in self.groups],
        }


@dataclass
class Bucket:
    """Sessions falling in the same UTC hour, day or week.

    Attributes:
        key: Bucket label, or the no-timestamp sentinel.
        first_sequence: Smallest first_sequence among member sessions.
        timestamp_ms: Earliest non-null member session timestamp.
        sessions: Member sessions in the order they were visited.
    """

    key: str
    first_sequence: int
    timestamp_ms: int | None = None
    sessions: list[Session] = field(default_factory=list)

    @property
    def operation_count(self) -> int:
        """Number of operations across all member sessions."""
        return sum(len(session.items) for session in self.sessions)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "key": self.key,
            "timestampMs": self.timestamp_ms,
            "firstSequence": self.first_sequence,
            "count": self.operation_count,
            "sessions": [session.to_dict() for session in self.sessions],
        }


class GroupingConfig(BaseModel):
    """Grouping options for a delta view.

    Attributes:
        grouping_mode: "strict" groups by op+path+fromValue+value,
            "loose" by op+path only.
        session_grouping: Split operations by exact lastModified.
        bucket_grouping: Add a time bucket layer above sessions.
        bucket_granularity: Bucket size when bucket_grouping is on.
        sort_by_time: Sort sessions and buckets newest first.

    Example:
        >>> config = GroupingConfig(grouping_mode="loose", session_grouping=True)
        >>> config = GroupingConfig.from_yaml("presets/sessions.yaml")
    """

    model_config = {"frozen": True}

    grouping_mode: Literal["strict", "loose"] = Field(
        default="strict",
        description="Signature used for grouping",
    )
    session_grouping: bool = Field(
        default=False,
        description="Group operations by exact lastModified",
    )
    bucket_grouping: bool = Field(
        default=False,
        description="Group sessions into time buckets",
    )
    bucket_granularity: BucketGranularity = Field(
        default="day",
        description="Time bucket size",
    )
    sort_by_time: bool = Field(
        default=False,
        description="Sort sessions and buckets by lastModified, newest first",
    )

    @classmethod
    def from_yaml(cls, path: Path | str) -> GroupingConfig:
        """Load a grouping preset from a YAML file.

        The file may hold the options at the top level or under a
        ``grouping`` key.

        Args:
            path: Path to the YAML preset.

        Returns:
            GroupingConfig loaded from the file.

        Raises:
            ConfigurationError: If the file is missing or holds invalid options.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            msg = f"Grouping preset not found: {path}"
            raise ConfigurationError(msg)

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Grouping preset must be a mapping: {path}")

        options = data.get("grouping", data)
        try:
            return cls(**options)
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid grouping preset {path}: {e}") from e

    def to_yaml(self, path: Path | str) -> None:
        """Save the grouping preset to a YAML file.

        Args:
            path: Path to the output YAML file.
        """
        import yaml

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.dump({"grouping": self.model_dump()}, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )


class FilterCriteria(BaseModel):
    """Filters applied to extracted operations before grouping.

    An empty set or blank search places no constraint on that dimension.

    Attributes:
        paths: Allowed paths (exact match).
        authors: Allowed lastModifiedByID values; "(null)" matches a missing id.
        path_search: Case-insensitive substring of the path.
    """

    model_config = {"frozen": True}

    paths: frozenset[str] = Field(default_factory=frozenset)
    authors: frozenset[str] = Field(default_factory=frozenset)
    path_search: str = ""

    @field_validator("path_search")
    @classmethod
    def _normalize_search(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_empty(self) -> bool:
        """Whether these criteria let every operation through."""
        return not self.paths and not self.authors and not self.path_search


@dataclass
class DeltaView:
    """Grouped rendering model for a filtered set of operations.

    Attributes:
        config: Grouping options the view was built with.
        operations: Filtered operations in appearance order.
        sessions: Sessions in display order.
        buckets: Buckets in display order, or None without bucket grouping.
        total: Number of operations before filtering.
    """

    config: GroupingConfig
    operations: list[PatchOperation]
    sessions: list[Session]
    buckets: list[Bucket] | None
    total: int

    @property
    def shown(self) -> int:
        """Number of operations after filtering."""
        return len(self.operations)

    @property
    def group_count(self) -> int:
        """Number of rendered signature groups."""
        return sum(len(session.groups) for session in self.sessions)

    @property
    def session_count(self) -> int:
        """Number of rendered sessions."""
        return len(self.sessions)

    def counts(self) -> dict[str, int]:
        """The four headline counts."""
        return {
            "total": self.total,
            "shown": self.shown,
            "groups": self.group_count,
            "sessions": self.session_count,
        }

    def summary(self) -> str:
        """Quick summary of the view.

        Returns:
            Summary like '12 ops, 9 shown, 4 groups, 2 sessions'
        """
        return f"{self.total} ops, {self.shown} shown, {self.group_count} groups, {self.session_count} sessions"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        data: dict[str, Any] = {
            "config": self.config.model_dump(),
            "counts": self.counts(),
        }
        if self.buckets is not None:
            data["buckets"] = [bucket.to_dict() for bucket in self.buckets]
        else:
            data["sessions"] = [session.to_dict() for session in self.sessions]
        return data


