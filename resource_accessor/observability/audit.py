"""Audit trail for resolver operations.

The AuditSink interface receives one event per list/open call and one per
root that had to be skipped, so that per-root failures stay visible even
though they never fail the call itself.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from resource_accessor.models import AuditEvent


class AuditSink(ABC):
    """Abstract interface for audit logging.

    Implementations can write to different backends (files, stdout,
    in-memory collectors for tests, ...).
    """

    @abstractmethod
    def log(self, event: AuditEvent) -> None:
        """Record an audit event.

        Args:
            event: The AuditEvent to record
        """
        pass


def _to_json_line(event: AuditEvent) -> str:
    return json.dumps(event.to_dict(), separators=(',', ':'))


class JSONLAuditSink(AuditSink):
    """Appends audit events to a JSONL (JSON Lines) file.

    Example log file content:
        {"ts":"2024-01-01T12:00:00","kind":"list","path":"db","root":null,...}
        {"ts":"2024-01-01T12:00:01","kind":"error","path":"db","root":"/app/lib/gone.jar",...}
    """

    def __init__(self, log_path: Path):
        """Initialize with log file path.

        Args:
            log_path: JSONL file to append to. Parent directories are created
                      if they don't exist.
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: AuditEvent) -> None:
        """Append event as a single JSON line."""
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write(_to_json_line(event) + '\n')


class StdoutAuditSink(AuditSink):
    """Prints audit events to stdout as JSON lines."""

    def log(self, event: AuditEvent) -> None:
        print(_to_json_line(event))
