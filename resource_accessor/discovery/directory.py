"""Filesystem scanning for directory-backed roots."""

from pathlib import Path

from resource_accessor.resources.normalizer import as_directory


class DirectoryScanner:
    """Scans a filesystem directory for resources.

    Names are reported in the same logical namespace the ArchiveScanner
    uses: the logical prefix followed by the path relative to the scanned
    directory, with directories ending in '/'. Results from both scanners
    can therefore be unioned directly.
    """

    def scan(
        self,
        directory: Path,
        logical_prefix: str,
        recursive: bool,
        include_files: bool,
        include_directories: bool,
    ) -> set[str]:
        """List the contents of directory.

        A directory that does not exist, is not a directory or cannot be
        read produces an empty set rather than an error.

        Args:
            directory: Physical directory to scan
            logical_prefix: Logical path the directory was resolved from
            recursive: Descend into subdirectories
            include_files: Include regular files
            include_directories: Include subdirectories

        Returns:
            Set of logical names
        """
        results: set[str] = set()

        try:
            directory = Path(directory)
            if not directory.is_dir():
                return results
        except OSError:
            return results

        self._collect(
            directory,
            as_directory(logical_prefix),
            recursive,
            include_files,
            include_directories,
            results,
        )
        return results

    def _collect(
        self,
        directory: Path,
        base: str,
        recursive: bool,
        include_files: bool,
        include_directories: bool,
        results: set[str],
    ) -> None:
        try:
            children = list(directory.iterdir())
        except OSError:
            # Unreadable directories contribute nothing
            return

        for child in children:
            try:
                is_directory = child.is_dir()
            except OSError:
                continue

            name = base + child.name
            if not is_directory:
                if include_files:
                    results.add(name)
                continue

            if include_directories:
                results.add(name + "/")

            # Symlinked directories are listed but not followed
            if recursive and not child.is_symlink():
                self._collect(
                    child,
                    name + "/",
                    recursive,
                    include_files,
                    include_directories,
                    results,
                )
