"""Public entry point for resolving, listing and opening resources.

This module provides the ResourceResolver class, which composes path
normalization, root enumeration and the archive/directory scanners, and the
SearchPath value that carries a resolver's root configuration.
"""

import logging
import zipfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Union

from resource_accessor.discovery.archive import ArchiveScanner, open_archive
from resource_accessor.discovery.directory import DirectoryScanner
from resource_accessor.discovery.roots import RootEnumerator
from resource_accessor.exceptions import ArchiveOpenError
from resource_accessor.models import (
    AuditEvent,
    ListingResult,
    PhysicalLocation,
    ResolverConfig,
    ResourceHandle,
    ResourceRoot,
)
from resource_accessor.observability.audit import AuditSink
from resource_accessor.resources.descriptor import (
    is_root_descriptor,
    parse_location,
    parse_root,
)
from resource_accessor.resources.normalizer import PathNormalizer, has_scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchPath:
    """Immutable, ordered root configuration of a resolver.

    A SearchPath can be handed to another ResourceResolver, on its own or
    inside that resolver's root list, to search the same roots.
    """
    roots: tuple[ResourceRoot, ...] = ()
    config: ResolverConfig = field(default_factory=ResolverConfig, compare=False)

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable["RootSpec"],
        config: ResolverConfig | None = None,
    ) -> "SearchPath":
        """Parse descriptors into a SearchPath.

        Nested SearchPath values are flattened in place.

        Raises:
            RootDescriptorError: If a descriptor cannot be parsed
        """
        config = config or ResolverConfig()
        roots: list[ResourceRoot] = []
        for descriptor in descriptors:
            if isinstance(descriptor, SearchPath):
                roots.extend(descriptor.roots)
            else:
                roots.append(parse_root(descriptor, config))
        return cls(tuple(roots), config)

    def extend(self, other: "SearchPath") -> "SearchPath":
        """Return a SearchPath consulting these roots first, then other's."""
        return SearchPath(self.roots + other.roots, self.config)

    def __iter__(self) -> Iterator[ResourceRoot]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)


RootSpec = Union[str, Path, ResourceRoot, SearchPath]


class ResourceResolver:
    """Resolves logical paths against an ordered list of resource roots.

    Roots may be directories or archives, including archive sub-trees
    addressed through a nested extension (``app.war!/WEB-INF/classes!/``).
    A logical path may exist in several roots at once; list() unions all
    of them and open_all() opens one stream per distinct physical location.

    "Not found" is reported as None, never as an exception. A root that
    cannot be read (e.g. a deleted or corrupt archive) is logged, reported to
    the audit sink and skipped, so the remaining roots still answer.

    The resolver holds no mutable state after construction and may be shared
    between threads.

    Example:
        >>> resolver = ResourceResolver(
        ...     roots=["/app/classes", "/app/lib/ext.jar"],
        ...     config=ResolverConfig(output_encoding="utf-8"),
        ... )
        >>> resolver.list("", "db", include_files=True)
        {'db/changelog.xml', 'db/extra.xml'}
        >>> streams = resolver.open_all("db/changelog.xml")
        >>> for stream in streams:
        ...     data = stream.read()
        ...     stream.close()
    """

    def __init__(
        self,
        roots: "SearchPath | Iterable[RootSpec]",
        config: ResolverConfig | None = None,
        audit_sink: AuditSink | None = None,
    ):
        """Initialize resolver with its roots.

        Args:
            roots: Root descriptors in search order, or a SearchPath taken
                   from another resolver
            config: Optional ResolverConfig. Defaults to the SearchPath's
                    configuration, or to ResolverConfig() for descriptors.
            audit_sink: Optional AuditSink receiving list/open/error events

        Raises:
            RootDescriptorError: If a root descriptor cannot be parsed
            EncodingError: If a descriptor needs decoding and the configured
                           output encoding is unsupported
        """
        if isinstance(roots, SearchPath):
            config = config or roots.config
            search_path = SearchPath(roots.roots, config)
        else:
            config = config or ResolverConfig()
            search_path = SearchPath.from_descriptors(roots, config)

        self._search_path = search_path
        self._config = config
        self._audit_sink = audit_sink

        self._normalizer = PathNormalizer(config)
        self._enumerator = RootEnumerator(search_path.roots)
        self._archive_scanner = ArchiveScanner()
        self._directory_scanner = DirectoryScanner()

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def roots(self) -> tuple[ResourceRoot, ...]:
        return self._search_path.roots

    def open_all(self, path: str) -> list[ResourceHandle] | None:
        """Open every distinct resource found at path.

        Each physical location is opened once, even when several roots lead
        to it. Locations that are directories are skipped.

        Args:
            path: Logical path, optionally prefixed with "classpath:", or a
                  root descriptor such as "jar:file:/app/lib/ext.jar!/db/a.xml"

        Returns:
            Open binary streams in root order, or None if nothing was found.
            The caller owns the streams and must close them.

        Raises:
            PathError: If path is malformed
            EncodingError: If the configured output encoding is unsupported
        """
        logical_path = self._normalizer.normalize(None, path)
        enumerator, logical_path = self._enumerator_for(logical_path)

        errors: list[Exception] = []
        streams: list[ResourceHandle] = []
        opened: list[str] = []

        try:
            for location in enumerator.resolve_roots(logical_path, errors):
                try:
                    stream = self._open_location(location)
                except (ArchiveOpenError, OSError) as e:
                    logger.warning("Cannot open %s: %s", location.external_form, e)
                    errors.append(e)
                    continue

                if stream is None:
                    continue

                logger.debug("Opening %s as %s", location.external_form, path)
                streams.append(stream)
                opened.append(location.external_form)
        except BaseException:
            # Nothing has been handed to the caller yet
            for stream in streams:
                stream.close()
            raise

        self._report_errors(logical_path, errors)
        self._audit("open", logical_path, detail={"opened": opened})

        return streams or None

    def list(
        self,
        relative_to: str | None,
        path: str,
        include_files: bool = True,
        include_directories: bool = False,
        recursive: bool = False,
    ) -> ListingResult:
        """List the resources below path across all roots.

        Returned names are logical paths: the physical part of each root
        (directory, archive file, nested extension) is removed, and the
        queried path is kept as their prefix. Directory names end with '/'.

        Args:
            relative_to: Optional base the path is relative to. If it names
                         a file (e.g. a changelog), the file's directory is
                         used as the base.
            path: Logical path to list
            include_files: Include files
            include_directories: Include directories
            recursive: Include all descendants instead of direct children

        Returns:
            Set of logical names, or None if nothing was found

        Raises:
            PathError: If path or relative_to is malformed
            EncodingError: If the configured output encoding is unsupported

        Example:
            >>> resolver.list("", "db", include_files=True, recursive=False)
            {'db/changelog.xml', 'db/extra.xml'}
            >>> resolver.list("db/changelog.xml", "sub", include_directories=True)
            {'db/sub/nested/'}
        """
        base = self._base_for(relative_to)
        logical_path = self._normalizer.normalize(base, path)
        enumerator, logical_path = self._enumerator_for(logical_path)

        errors: list[Exception] = []
        names: set[str] = set()

        for location in enumerator.resolve_roots(logical_path, errors):
            if location.is_archive:
                try:
                    names |= self._archive_scanner.scan(
                        location.path,
                        logical_path,
                        recursive,
                        include_files,
                        include_directories,
                        extension=location.extension,
                    )
                except ArchiveOpenError as e:
                    logger.warning("Skipping archive %s: %s", location.path, e)
                    errors.append(e)
            else:
                names |= self._directory_scanner.scan(
                    location.path,
                    logical_path,
                    recursive,
                    include_files,
                    include_directories,
                )

        self._report_errors(logical_path, errors)
        self._audit(
            "list",
            logical_path,
            detail={
                "matches": len(names),
                "recursive": recursive,
                "include_files": include_files,
                "include_directories": include_directories,
            },
        )

        return names or None

    def as_search_path(self) -> SearchPath:
        """Return the root configuration for use by another resolver.

        Example:
            >>> shared = ResourceResolver(["/app/lib/common.jar"])
            >>> app = ResourceResolver(["/app/classes", shared.as_search_path()])
        """
        return self._search_path

    def describe(self) -> str:
        """Return a stable description of the configured roots, in order."""
        forms = ",".join(root.external_form for root in self._search_path.roots)
        return f"{type(self).__name__}({forms})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def _enumerator_for(self, logical_path: str) -> tuple[RootEnumerator, str]:
        """Pick the enumerator for a normalized path.

        Paths that are root descriptors themselves are resolved against an
        ad-hoc root built from the descriptor instead of the configured roots.
        """
        if is_root_descriptor(logical_path):
            root, entry = parse_location(logical_path, self._config)
            return RootEnumerator([root]), entry
        return self._enumerator, logical_path

    def _base_for(self, relative_to: str | None) -> str | None:
        """Return the base to join onto, the parent if relative_to is a file."""
        if not relative_to:
            return relative_to

        normalized = self._normalizer.normalize(None, relative_to)
        if not normalized or normalized.endswith("/") or has_scheme(normalized):
            return relative_to

        for location in self._enumerator.resolve_roots(normalized):
            if self._is_file(location):
                parent, _, _ = relative_to.replace("\\", "/").rpartition("/")
                return parent
            break

        return relative_to

    @staticmethod
    def _is_file(location: PhysicalLocation) -> bool:
        if location.is_archive:
            return bool(location.entry_name) and not location.entry_name.endswith("/")
        return location.path.is_file()

    def _open_location(self, location: PhysicalLocation) -> ResourceHandle | None:
        """Open a stream on a single location, None for directories."""
        if location.is_archive:
            if not self._is_file(location):
                return None
            # The returned member stream keeps the archive file open after
            # the ZipFile itself is closed.
            with open_archive(location.path) as archive:
                try:
                    return archive.open(location.entry_name)
                # Encrypted members raise RuntimeError, unsupported
                # compression methods NotImplementedError
                except (
                    KeyError,
                    zipfile.BadZipFile,
                    RuntimeError,
                    NotImplementedError,
                    ValueError,
                ) as e:
                    raise ArchiveOpenError(
                        f"Cannot read entry {location.entry_name} of {location.path}: {e}",
                        location.path,
                    ) from e

        if location.path.is_dir():
            return None
        return open(location.path, 'rb')

    def _report_errors(self, logical_path: str, errors: Iterable[Exception]) -> None:
        for error in errors:
            archive_path = getattr(error, "archive_path", None)
            if archive_path is None:
                archive_path = getattr(error, "filename", None)
            self._audit(
                "error",
                logical_path,
                root=str(archive_path) if archive_path is not None else None,
                detail={"error": type(error).__name__, "message": str(error)},
            )

    def _audit(
        self,
        kind: str,
        logical_path: str,
        root: str | None = None,
        detail: dict | None = None,
    ) -> None:
        if self._audit_sink:
            self._audit_sink.log(
                AuditEvent(
                    ts=datetime.now(),
                    kind=kind,
                    path=logical_path,
                    root=root,
                    detail=detail or {},
                )
            )
