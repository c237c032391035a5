"""Data models for resource-accessor."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO

DEFAULT_ARCHIVE_SUFFIXES = frozenset({".jar", ".zip", ".war", ".ear"})

# Caller-owned readable byte stream returned by ResourceResolver.open_all()
ResourceHandle = BinaryIO

# Distinct logical names, or None when nothing matched
ListingResult = set[str] | None


class RootKind(Enum):
    """How a resource root stores its resources."""
    DIRECTORY = "directory"
    ARCHIVE = "archive"


class LocationKind(Enum):
    """Where a resolved resource physically lives."""
    DIRECTORY = "directory"
    ARCHIVE_ENTRY = "archive_entry"


def _archive_uri(archive_path: Path, extension: str) -> str:
    uri = f"jar:{archive_path.as_uri()}!/"
    if extension:
        uri += f"{extension.rstrip('/')}!/"
    return uri


@dataclass(frozen=True)
class ResourceRoot:
    """A configured location that can produce resources.

    Roots are tagged once, when the descriptor is parsed, and never
    re-derived from strings during resolution.

    Attributes:
        kind: Directory-backed or archive-backed
        path: Local directory or archive file. None for descriptors that do
              not denote a local path (those roots never match anything).
        extension: Prefix of the archive entries that belong to this root,
                   either "" or ending with "/" (e.g. "WEB-INF/classes/")
        descriptor: The descriptor string the root was configured with
    """
    kind: RootKind
    path: Path | None
    extension: str = ""
    descriptor: str = ""

    @property
    def is_local(self) -> bool:
        return self.path is not None

    @property
    def external_form(self) -> str:
        """Canonical URL-like form of the root."""
        if self.path is None:
            return self.descriptor
        if self.kind is RootKind.ARCHIVE:
            return _archive_uri(self.path, self.extension)
        uri = self.path.as_uri()
        return uri if uri.endswith("/") else uri + "/"

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {
            "kind": self.kind.value,
            "path": str(self.path) if self.path is not None else None,
            "extension": self.extension,
            "descriptor": self.descriptor,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResourceRoot":
        """Deserialize from dict."""
        path = data.get("path")
        return cls(
            kind=RootKind(data["kind"]),
            path=Path(path) if path is not None else None,
            extension=data.get("extension", ""),
            descriptor=data.get("descriptor", ""),
        )


@dataclass(frozen=True)
class PhysicalLocation:
    """Concrete place backing a resolved resource.

    For DIRECTORY locations ``path`` is the filesystem path of the resource.
    For ARCHIVE_ENTRY locations ``path`` is the archive file and
    ``entry_name`` the full entry name inside it, including the root's
    extension prefix.
    """
    kind: LocationKind
    path: Path
    entry_name: str | None = None
    extension: str = ""

    @property
    def is_archive(self) -> bool:
        return self.kind is LocationKind.ARCHIVE_ENTRY

    @property
    def logical_name(self) -> str | None:
        """Entry name with the root's extension prefix removed."""
        if self.entry_name is None:
            return None
        return self.entry_name[len(self.extension):]

    @property
    def external_form(self) -> str:
        """Canonical identity used to deduplicate locations."""
        if self.is_archive:
            return _archive_uri(self.path, self.extension) + (self.logical_name or "")
        return self.path.as_uri()


@dataclass
class ResolverConfig:
    """Configuration consumed by the resolver and its components."""
    output_encoding: str = "utf-8"
    archive_suffixes: set[str] = field(
        default_factory=lambda: set(DEFAULT_ARCHIVE_SUFFIXES)
    )
    roots: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {
            "output_encoding": self.output_encoding,
            "archive_suffixes": sorted(self.archive_suffixes),
            "roots": list(self.roots),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResolverConfig":
        """Deserialize from dict."""
        suffixes = data.get("archive_suffixes")
        if suffixes is None:
            suffixes = DEFAULT_ARCHIVE_SUFFIXES
        return cls(
            output_encoding=data.get("output_encoding", "utf-8"),
            archive_suffixes={suffix.lower() for suffix in suffixes},
            roots=[str(root) for root in data.get("roots") or []],
        )


@dataclass
class AuditEvent:
    """Record of a resolver operation."""
    ts: datetime
    kind: str  # "list", "open", "error"
    path: str
    root: str | None = None
    detail: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {
            "ts": self.ts.isoformat(),
            "kind": self.kind,
            "path": self.path,
            "root": self.root,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEvent":
        """Deserialize from dict."""
        return cls(
            ts=datetime.fromisoformat(data["ts"]),
            kind=data["kind"],
            path=data["path"],
            root=data.get("root"),
            detail=data.get("detail", {}),
        )
