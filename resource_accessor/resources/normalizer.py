"""Logical path normalization."""

import re
from urllib.parse import unquote

from resource_accessor.exceptions import EncodingError, PathError
from resource_accessor.models import ResolverConfig

CLASSPATH_PREFIXES = ("classpath*:", "classpath:")

# At least two characters so that Windows drive letters are not schemes
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")
_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def strip_classpath_prefix(path: str) -> tuple[str, bool]:
    """Remove a leading ``classpath:`` or ``classpath*:`` prefix.

    Returns:
        Tuple of (path without prefix, whether a prefix was removed)
    """
    for prefix in CLASSPATH_PREFIXES:
        if path.startswith(prefix):
            return path[len(prefix):], True
    return path, False


def has_scheme(path: str) -> bool:
    """True if path starts with a URL scheme such as ``file:`` or ``jar:``."""
    return _SCHEME.match(path) is not None


def as_directory(path: str) -> str:
    """Give a non-empty path directory semantics by ensuring a trailing '/'."""
    if path and not path.endswith("/"):
        return path + "/"
    return path


def check_encoding(encoding: str) -> None:
    """Raise EncodingError unless encoding names a usable text codec."""
    try:
        "".encode(encoding)
    except (LookupError, TypeError):
        raise EncodingError(f"Unsupported output encoding: {encoding!r}") from None


def percent_decode(value: str, encoding: str) -> str:
    """Decode %XX escapes using the given text encoding.

    Raises:
        EncodingError: If encoding is not a supported text encoding
        PathError: If value contains an unpaired escape or the decoded bytes
                   are not valid in the encoding
    """
    check_encoding(encoding)

    if _BAD_ESCAPE.search(value):
        raise PathError(f"Malformed escape sequence in path: {value}")

    try:
        return unquote(value, encoding=encoding, errors="strict")
    except UnicodeDecodeError as e:
        raise PathError(f"Cannot decode path {value!r} as {encoding}: {e}") from e


class PathNormalizer:
    """Canonicalizes logical paths before they are resolved against roots.

    A normalized logical path is relative, forward-slash separated, free of
    ``..`` segments and classpath scheme prefixes. Paths carrying any other
    scheme (``file:``, ``jar:`` ...) are root descriptors and are returned
    untouched.
    """

    def __init__(self, config: ResolverConfig | None = None):
        """Initialize with resolver configuration.

        Args:
            config: Supplies the output encoding used for percent-decoding
        """
        self.config = config or ResolverConfig()

    def normalize(self, relative_to: str | None, path: str) -> str:
        """Normalize path, joined onto relative_to when one is given.

        Args:
            relative_to: Optional base path; ignored when path starts with a
                         scheme or a leading '/'
            path: The path to normalize (e.g. "classpath:db/changelog.xml")

        Returns:
            Normalized logical path (e.g. "db/changelog.xml")

        Raises:
            PathError: If path is None, malformed, or escapes its root
            EncodingError: If the configured output encoding is unsupported
        """
        if path is None:
            raise PathError("Path must not be None")

        path = path.replace("\\", "/")
        path, had_prefix = strip_classpath_prefix(path)

        if not had_prefix and has_scheme(path):
            return path

        if relative_to and not had_prefix and not path.startswith("/"):
            base, _ = strip_classpath_prefix(relative_to.replace("\\", "/"))
            if base:
                path = base.rstrip("/") + "/" + path
                # Joined onto a root descriptor, which is decoded when parsed
                if has_scheme(path):
                    return path

        path = percent_decode(path, self.config.output_encoding)
        path = _REPEATED_SEPARATORS.sub("/", path).lstrip("/")

        if _DRIVE_LETTER.match(path):
            raise PathError(f"Absolute paths are not allowed: {path}")

        if ".." in path.split("/"):
            raise PathError(f"Path traversal detected (.. component): {path}")

        return path
