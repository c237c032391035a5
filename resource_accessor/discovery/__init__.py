"""Discovery module for root enumeration and archive/directory scanning."""

from resource_accessor.discovery.archive import ArchiveScanner
from resource_accessor.discovery.directory import DirectoryScanner
from resource_accessor.discovery.roots import RootEnumerator

__all__ = ["ArchiveScanner", "DirectoryScanner", "RootEnumerator"]
