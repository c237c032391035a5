#!/usr/bin/env python3
"""Example: Standalone usage of the resource resolver.

This example resolves resources across an exploded classes directory and a
packed archive built on the fly, the way a migration tool would look up a
changelog and the scripts it includes.
"""

import logging
import tempfile
import zipfile
from pathlib import Path

from resource_accessor import (
    ResourceReader,
    ResourceResolver,
    StdoutAuditSink,
    load_config,
)


def build_extension_jar(directory: Path) -> Path:
    """Write a small archive holding an extra changelog."""
    jar_path = directory / "ext.jar"
    with zipfile.ZipFile(jar_path, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        archive.writestr("db/extra.xml", "<databaseChangeLog/>\n")
    return jar_path


def main():
    """Demonstrate standalone usage."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Resource Accessor - Standalone Usage Example")
    print("=" * 60)
    print()

    config = load_config(Path(__file__).parent / "resources.yaml")

    with tempfile.TemporaryDirectory() as tmpdir:
        jar_path = build_extension_jar(Path(tmpdir))

        print("Initializing resolver...")
        resolver = ResourceResolver(
            roots=config.roots + [str(jar_path)],
            config=config,
            audit_sink=StdoutAuditSink(),
        )
        print(resolver.describe())
        print()

        # List changelogs from every root
        print("Changelogs below 'db':")
        for name in sorted(resolver.list("", "db") or []):
            print(f"  - {name}")
        print()

        # Includes are resolved relative to the including changelog
        print("Scripts included by db/changelog.xml:")
        for name in sorted(resolver.list("db/changelog.xml", "sub", recursive=True) or []):
            print(f"  - {name}")
        print()

        # Open and read a resource
        print("Reading db/changelog.xml...")
        reader = ResourceReader(max_bytes=300)
        for stream in resolver.open_all("classpath:db/changelog.xml") or []:
            try:
                content, truncated = reader.read_text(stream, encoding=config.output_encoding)
            finally:
                stream.close()
            print("-" * 60)
            print(content + ("..." if truncated else ""))
            print("-" * 60)
        print()

        # Share the roots with a second resolver
        print("Composing a second resolver...")
        composed = ResourceResolver([resolver.as_search_path()], config=config)
        print(composed.describe())
        print()

    print("=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
