"""Entry scanning for packed archives (zip, jar, war)."""

import zipfile
from pathlib import Path

from resource_accessor.exceptions import ArchiveOpenError
from resource_accessor.resources.normalizer import as_directory


def open_archive(archive_path: Path) -> zipfile.ZipFile:
    """Open an archive read-only.

    The returned ZipFile is meant to be used as a context manager so the
    handle is released on every exit path.

    Raises:
        ArchiveOpenError: If the archive is missing, unreadable or corrupt
    """
    try:
        return zipfile.ZipFile(archive_path)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveOpenError(
            f"Cannot open archive {archive_path}: {e}", archive_path
        ) from e


def read_entry_names(archive_path: Path) -> list[str]:
    """Return every entry name stored in the archive."""
    with open_archive(archive_path) as archive:
        return archive.namelist()


def logical_entries(names: list[str], extension: str = "") -> set[str]:
    """Map raw entry names into a root's logical namespace.

    Entries outside the extension prefix are dropped and the prefix is
    removed from the rest. Directories implied by deeper entries are added,
    so that archives written without explicit directory entries still list
    their directories. Directory names end with '/'.
    """
    entries = set()
    for name in names:
        if extension:
            if not name.startswith(extension):
                continue
            name = name[len(extension):]
        if not name:
            continue

        entries.add(name)

        parents = name.rstrip("/").split("/")[:-1]
        for depth in range(1, len(parents) + 1):
            entries.add("/".join(parents[:depth]) + "/")

    return entries


class ArchiveScanner:
    """Lists the entries of an archive that lie below a logical prefix.

    Matching is plain prefix matching, not globbing. The prefix is always
    treated as a directory: the entry equal to the prefix itself is never
    returned, only entries below it.
    """

    def scan(
        self,
        archive_path: Path,
        entry_prefix: str,
        recursive: bool,
        include_files: bool,
        include_directories: bool,
        extension: str = "",
    ) -> set[str]:
        """Find archive entries below entry_prefix.

        Args:
            archive_path: Archive file to read
            entry_prefix: Logical prefix to list (e.g. "db/changelog")
            recursive: Include all descendants instead of direct children only
            include_files: Include non-directory entries
            include_directories: Include directory entries
            extension: Nested extension prefix of the root (e.g.
                       "WEB-INF/classes/"); entries outside it are ignored

        Returns:
            Set of logical entry names, directories ending with '/'

        Raises:
            ArchiveOpenError: If the archive cannot be opened

        Example:
            >>> scanner = ArchiveScanner()
            >>> scanner.scan(Path("ext.jar"), "db", False, True, False)
            {'db/extra.xml'}
        """
        names = read_entry_names(archive_path)
        prefix = as_directory(entry_prefix)

        results = set()
        for name in logical_entries(names, extension):
            if not name.startswith(prefix):
                continue

            remainder = name[len(prefix):]
            if not remainder:
                continue

            if not recursive and "/" in remainder.rstrip("/"):
                continue

            is_directory = name.endswith("/")
            if is_directory and include_directories:
                results.add(name)
            elif not is_directory and include_files:
                results.add(name)

        return results
