"""Resolution of logical paths against the configured resource roots."""

import logging
from collections.abc import Sequence

from resource_accessor.discovery.archive import logical_entries, read_entry_names
from resource_accessor.exceptions import ArchiveOpenError
from resource_accessor.models import (
    LocationKind,
    PhysicalLocation,
    ResourceRoot,
    RootKind,
)
from resource_accessor.resources.normalizer import as_directory

logger = logging.getLogger(__name__)


class RootEnumerator:
    """Finds the physical locations of a logical path across all roots.

    Roots are consulted in configuration order. The same physical location
    reached through two roots is reported once, for the first root.
    """

    def __init__(self, roots: Sequence[ResourceRoot]):
        """Initialize with the ordered roots to search.

        Args:
            roots: Parsed resource roots
        """
        self.roots = tuple(roots)

    def resolve_roots(
        self,
        logical_path: str,
        errors: list[Exception] | None = None,
    ) -> list[PhysicalLocation]:
        """Resolve logical_path against every root.

        Args:
            logical_path: Normalized logical path ("" denotes the root itself)
            errors: Optional list collecting ArchiveOpenErrors of skipped roots

        Returns:
            Distinct physical locations in root order; empty when no root
            holds the path
        """
        locations: dict[str, PhysicalLocation] = {}

        for root in self.roots:
            try:
                location = self.locate(root, logical_path)
            except ArchiveOpenError as e:
                logger.warning("Skipping root %s: %s", root.external_form, e)
                if errors is not None:
                    errors.append(e)
                continue

            if location is not None:
                locations.setdefault(location.external_form, location)

        return list(locations.values())

    def locate(self, root: ResourceRoot, logical_path: str) -> PhysicalLocation | None:
        """Find logical_path in a single root.

        Returns:
            The matching location, or None if the root does not hold the path

        Raises:
            ArchiveOpenError: If an archive root cannot be read
        """
        if not root.is_local:
            return None

        if root.kind is RootKind.ARCHIVE:
            entry_name = self._find_entry(root, logical_path)
            if entry_name is None:
                return None
            return PhysicalLocation(
                LocationKind.ARCHIVE_ENTRY,
                root.path,
                entry_name,
                root.extension,
            )

        candidate = root.path / logical_path if logical_path else root.path
        try:
            if not candidate.exists():
                return None
            candidate = candidate.resolve()
        except OSError:
            return None

        return PhysicalLocation(LocationKind.DIRECTORY, candidate)

    def _find_entry(self, root: ResourceRoot, logical_path: str) -> str | None:
        """Return the full entry name holding logical_path, if any.

        Directories may be explicit entries or only implied by deeper
        entries; either way the directory form (trailing '/') is returned.
        """
        entries = logical_entries(read_entry_names(root.path), root.extension)

        if not logical_path:
            return root.extension if (entries or not root.extension) else None

        if not logical_path.endswith("/") and logical_path in entries:
            return root.extension + logical_path

        directory = as_directory(logical_path)
        if directory in entries:
            return root.extension + directory

        return None
