"""Core data models shared across empd components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EntryKind(Enum):
    """File type reported by ``lstat`` or a directory entry."""

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"


class MetadataStatus(Enum):
    """Tag of a :class:`MetadataResult`."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    OTHER_ERROR = "other_error"


@dataclass(frozen=True)
class MetadataResult:
    """Outcome of a single ``lstat`` call on the queried path."""

    status: MetadataStatus
    kind: Optional[EntryKind] = None
    size: int = 0
    message: Optional[str] = None

    @classmethod
    def success(cls, kind: EntryKind, size: int) -> "MetadataResult":
        return cls(MetadataStatus.SUCCESS, kind=kind, size=size)

    @classmethod
    def not_found(cls) -> "MetadataResult":
        return cls(MetadataStatus.NOT_FOUND)

    @classmethod
    def permission_denied(cls) -> "MetadataResult":
        return cls(MetadataStatus.PERMISSION_DENIED)

    @classmethod
    def other_error(cls, message: str) -> "MetadataResult":
        return cls(MetadataStatus.OTHER_ERROR, message=message)


@dataclass(frozen=True)
class DirectoryCensus:
    """Counts of the immediate children of a directory."""

    directories: int = 0
    files: int = 0
    symlinks: int = 0

    @property
    def total(self) -> int:
        return self.directories + self.files + self.symlinks

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class Outcome(Enum):
    """Result of one inspection, each member carrying its process exit code."""

    SUCCESS = 0
    NOT_FOUND = 11
    PERMISSION_DENIED = 12
    NON_EMPTY_FILE = 21
    FILE_DELETE_DECLINED = 22
    NON_EMPTY_DIRECTORY = 31
    DIRECTORY_DELETE_DECLINED = 32
    SYMLINK_RESOLVES = 41
    SYMLINK_DELETE_DECLINED = 42

    @property
    def exit_code(self) -> int:
        return self.value


@dataclass
class InspectionResult:
    """Everything the inspector learned about the queried path."""

    outcome: Outcome
    path: str
    display_path: str
    kind: Optional[EntryKind] = None
    canonical_path: Optional[str] = None
    census: Optional[DirectoryCensus] = None
    size: Optional[int] = None
    link_target: Optional[str] = None
    deleted: bool = False

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code


__all__ = [
    "DirectoryCensus",
    "EntryKind",
    "InspectionResult",
    "MetadataResult",
    "MetadataStatus",
    "Outcome",
]
