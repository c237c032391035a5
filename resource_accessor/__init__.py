"""resource-accessor - Logical resource resolution over directories and archives.

Resolves logical paths such as "db/changelog.xml" against an ordered list of
resource roots (directories, jar/zip archives, and sub-trees of archives),
lists the resources below a path and opens them as byte streams.
"""

from resource_accessor.exceptions import (
    ResourceAccessorError,
    PathError,
    EncodingError,
    ArchiveOpenError,
    RootDescriptorError,
    ConfigError,
)

from resource_accessor.models import (
    RootKind,
    LocationKind,
    ResourceRoot,
    PhysicalLocation,
    ResolverConfig,
    AuditEvent,
)

from resource_accessor.config import load_config
from resource_accessor.observability import AuditSink, JSONLAuditSink, StdoutAuditSink
from resource_accessor.resources import PathNormalizer, ResourceReader, parse_root
from resource_accessor.runtime import ResourceResolver, SearchPath

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "ResourceAccessorError",
    "PathError",
    "EncodingError",
    "ArchiveOpenError",
    "RootDescriptorError",
    "ConfigError",
    # Models
    "RootKind",
    "LocationKind",
    "ResourceRoot",
    "PhysicalLocation",
    "ResolverConfig",
    "AuditEvent",
    # Configuration
    "load_config",
    # Resolution
    "ResourceResolver",
    "SearchPath",
    "PathNormalizer",
    "ResourceReader",
    "parse_root",
    # Observability
    "AuditSink",
    "JSONLAuditSink",
    "StdoutAuditSink",
]
