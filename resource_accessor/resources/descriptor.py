"""Parsing of resource root descriptors.

A descriptor is the string a root is configured with. It is parsed once,
into a ResourceRoot, so that resolution never has to re-inspect strings:

    /app/classes                                  directory root
    file:///app/classes/                          directory root
    /app/lib/ext.jar                              archive root
    jar:file:/app/lib/ext.jar!/                   archive root
    jar:file:/app/app.war!/WEB-INF/classes!/      archive root with extension
    zip:/opt/domain/app.zip!/                     archive root
    vfs:/content/app.jar                          non-local, never matches
"""

import re
import zipfile
from pathlib import Path

from resource_accessor.exceptions import PathError, RootDescriptorError
from resource_accessor.models import ResolverConfig, ResourceRoot, RootKind
from resource_accessor.resources.normalizer import has_scheme, percent_decode

ARCHIVE_PREFIXES = ("jar:file:", "wsjar:file:", "jar:", "wsjar:", "zip:")
FILE_PREFIX = "file:"
NESTING_DELIMITER = "!"

# The outer archive, an optional extension and an optional tail
MAX_DESCRIPTOR_PARTS = 3

_WINDOWS_FILE_PATH = re.compile(r"^/[A-Za-z]:/")


def is_archive_descriptor(value: str) -> bool:
    """True if value uses one of the archive-indicating schemes."""
    return value.startswith(ARCHIVE_PREFIXES)


def is_root_descriptor(value: str) -> bool:
    """True if value is a descriptor that can be resolved on its own."""
    return is_archive_descriptor(value) or value.startswith(FILE_PREFIX)


def _decode(value: str, config: ResolverConfig, descriptor: str) -> str:
    try:
        return percent_decode(value, config.output_encoding)
    except PathError as e:
        raise RootDescriptorError(f"Invalid root descriptor {descriptor!r}: {e}") from e


def _file_url_to_path(url: str, config: ResolverConfig, descriptor: str) -> str | None:
    """Convert a ``file:`` URL to a local path string, None if not local."""
    path = url[len(FILE_PREFIX):]
    if path.startswith("//"):
        host, _, rest = path[2:].partition("/")
        if host not in ("", "localhost"):
            return None
        path = "/" + rest
    if _WINDOWS_FILE_PATH.match(path):
        path = path[1:]
    return _decode(path, config, descriptor)


def _is_archive_file(path: Path, config: ResolverConfig) -> bool:
    if path.suffix.lower() in config.archive_suffixes:
        return True
    return path.is_file() and zipfile.is_zipfile(path)


def _parse_local(path: Path, descriptor: str, config: ResolverConfig) -> ResourceRoot:
    path = path.expanduser()
    if not path.is_dir() and _is_archive_file(path, config):
        return ResourceRoot(RootKind.ARCHIVE, path.resolve(), "", descriptor)
    return ResourceRoot(RootKind.DIRECTORY, path.resolve(), "", descriptor)


def _split_archive(descriptor: str) -> tuple[str, list[str]]:
    """Split an archive descriptor into its archive part and inner parts."""
    remainder = descriptor
    for scheme in ("jar:", "wsjar:", "zip:"):
        if remainder.startswith(scheme):
            remainder = remainder[len(scheme):]
            break

    parts = remainder.split(NESTING_DELIMITER)
    if len(parts) > MAX_DESCRIPTOR_PARTS:
        raise RootDescriptorError(
            f"Too many nested archive delimiters in {descriptor!r}: "
            f"at most {MAX_DESCRIPTOR_PARTS - 1} '{NESTING_DELIMITER}' are supported"
        )
    return parts[0], parts[1:]


def _archive_root(
    archive_part: str,
    inner: list[str],
    descriptor: str,
    config: ResolverConfig,
) -> ResourceRoot:
    if archive_part.startswith(FILE_PREFIX):
        archive_file = _file_url_to_path(archive_part, config, descriptor)
    elif has_scheme(archive_part):
        archive_file = None
    else:
        archive_file = archive_part
        if _WINDOWS_FILE_PATH.match(archive_file):
            archive_file = archive_file[1:]
        archive_file = _decode(archive_file, config, descriptor)

    if not archive_file:
        return ResourceRoot(RootKind.ARCHIVE, None, "", descriptor)

    segments = [_decode(part, config, descriptor).strip("/") for part in inner]
    extension = "/".join(segment for segment in segments if segment)
    if extension:
        extension += "/"

    return ResourceRoot(
        RootKind.ARCHIVE,
        Path(archive_file).expanduser().resolve(),
        extension,
        descriptor,
    )


def parse_root(
    value: "str | Path | ResourceRoot",
    config: ResolverConfig | None = None,
) -> ResourceRoot:
    """Parse a configured root descriptor into a ResourceRoot.

    Everything after the archive path in an archive descriptor becomes the
    root's extension, e.g. ``jar:file:/app.war!/WEB-INF/classes!/`` yields
    the extension ``WEB-INF/classes/``.

    Args:
        value: Descriptor string, local path, or an already parsed root
        config: Supplies the output encoding and archive suffixes

    Returns:
        The parsed ResourceRoot

    Raises:
        RootDescriptorError: If the descriptor is malformed or has more than
                             two nesting delimiters
        EncodingError: If the configured output encoding is unsupported
    """
    config = config or ResolverConfig()

    if isinstance(value, ResourceRoot):
        return value
    if isinstance(value, Path):
        return _parse_local(value, str(value), config)

    descriptor = str(value)
    if is_archive_descriptor(descriptor):
        archive_part, inner = _split_archive(descriptor)
        return _archive_root(archive_part, inner, descriptor, config)

    if descriptor.startswith(FILE_PREFIX):
        local = _file_url_to_path(descriptor, config, descriptor)
        if local is None:
            return ResourceRoot(RootKind.DIRECTORY, None, "", descriptor)
        return _parse_local(Path(local), descriptor, config)

    if has_scheme(descriptor):
        return ResourceRoot(RootKind.DIRECTORY, None, "", descriptor)

    return _parse_local(Path(descriptor), descriptor, config)


def parse_location(
    value: str,
    config: ResolverConfig | None = None,
) -> tuple[ResourceRoot, str]:
    """Parse a descriptor naming a resource, rather than a root.

    The last part of an archive descriptor is taken as the entry path, so
    ``jar:file:/ext.jar!/db`` yields the root ``jar:file:/ext.jar!/`` and the
    logical path ``db``. A ``file:`` URL naming a plain file yields its
    parent directory as root and the file name as logical path.

    Returns:
        Tuple of (root, logical path within that root)
    """
    config = config or ResolverConfig()

    if is_archive_descriptor(value):
        archive_part, inner = _split_archive(value)
        entry = inner[-1] if inner else ""
        root = _archive_root(archive_part, inner[:-1], value, config)
        return root, _decode(entry, config, value).strip("/")

    root = parse_root(value, config)
    if (
        root.kind is RootKind.DIRECTORY
        and root.path is not None
        and root.path.is_file()
    ):
        parent = ResourceRoot(RootKind.DIRECTORY, root.path.parent, "", value)
        return parent, root.path.name
    return root, ""
