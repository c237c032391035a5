"""Pytest configuration and shared fixtures."""

import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from resource_accessor.models import AuditEvent
from resource_accessor.observability.audit import AuditSink


class CollectingAuditSink(AuditSink):
    """AuditSink keeping events in memory."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> list[AuditEvent]:
        return [event for event in self.events if event.kind == kind]


def write_archive(path: Path, entries: dict) -> Path:
    """Write a zip archive; entries mapping to None become directory entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            if content is None:
                archive.writestr(name if name.endswith("/") else name + "/", "")
            else:
                archive.writestr(name, content)
    return path


def overwrite_central_header(path: Path, offset: int, value: bytes) -> Path:
    """Overwrite bytes of the first central directory header of an archive.

    Offset 8 holds the general purpose flags (bit 0: encrypted), offset 10
    the compression method.
    """
    data = bytearray(path.read_bytes())
    start = data.index(b"PK\x01\x02") + offset
    data[start:start + len(value)] = value
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_archive() -> Callable[[Path, dict], Path]:
    """Factory writing zip archives from an entry mapping."""
    return write_archive


@pytest.fixture
def audit_sink() -> CollectingAuditSink:
    """In-memory audit sink."""
    return CollectingAuditSink()


@pytest.fixture
def classes_dir(temp_dir: Path) -> Path:
    """Create a directory root resembling /app/classes."""
    classes = temp_dir / "app" / "classes"
    (classes / "db" / "sub" / "nested").mkdir(parents=True)
    (classes / "db" / "changelog.xml").write_text("<databaseChangeLog/>")
    (classes / "db" / "sub" / "one.sql").write_text("select 1;")
    (classes / "db" / "sub" / "nested" / "deep.sql").write_text("select 2;")
    (classes / "config.properties").write_text("key=value")
    return classes


@pytest.fixture
def ext_jar(temp_dir: Path) -> Path:
    """Create an archive root resembling /app/lib/ext.jar."""
    return write_archive(
        temp_dir / "app" / "lib" / "ext.jar",
        {
            "META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n",
            "db/": None,
            "db/extra.xml": "<extra/>",
            "db/more/": None,
            "db/more/two.sql": "select 3;",
            "dbx/other.xml": "<other/>",
        },
    )


@pytest.fixture
def nested_war(temp_dir: Path) -> Path:
    """Create an archive whose resources live under WEB-INF/classes."""
    return write_archive(
        temp_dir / "app" / "app.war",
        {
            "WEB-INF/classes/db/war.xml": "<war/>",
            "WEB-INF/classes/db/migrations/001.sql": "create table t;",
            "WEB-INF/lib/ignored.jar": "not really a jar",
            "db/outside.xml": "<outside/>",
        },
    )


@pytest.fixture
def patch_central_header() -> Callable[[Path, int, bytes], Path]:
    """Damage an archive's first central directory header in place."""
    return overwrite_central_header
