"""Command-line interface for resource-accessor.

This module provides a CLI for inspecting resource roots without writing
code: listing the resources below a logical path, printing the contents of
every resource found at a path, and describing the configured roots.

Commands:
    list: List resources below a logical path
    cat: Print every resource found at a logical path
    describe: Print the resolver description

Example:
    $ resource-accessor list db --root ./classes --root ./lib/ext.jar
    $ resource-accessor list db --root ./classes --recursive --dirs
    $ resource-accessor cat db/changelog.xml --config resources.yaml
    $ resource-accessor describe --root "jar:file:app.war!/WEB-INF/classes!/"
"""

import argparse
import logging
import sys
import zipfile
from pathlib import Path
from typing import NoReturn

from resource_accessor.config import load_config
from resource_accessor.exceptions import ResourceAccessorError
from resource_accessor.models import ResolverConfig
from resource_accessor.observability.audit import JSONLAuditSink
from resource_accessor.resources.reader import ResourceReader
from resource_accessor.runtime.resolver import ResourceResolver


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        default=[],
        help="Resource root: directory, archive or descriptor such as "
             "'jar:file:app.war!/WEB-INF/classes!/' (can be specified multiple times)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file providing roots and settings (optional)",
    )
    parser.add_argument(
        "--encoding",
        help="Output encoding used to percent-decode paths (default: utf-8)",
    )
    parser.add_argument(
        "--audit-log",
        type=Path,
        help="Append audit events to this JSONL file (optional)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="resource-accessor",
        description="Command-line interface for resource-accessor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # List command
    list_parser = subparsers.add_parser(
        "list",
        help="List resources below a logical path",
        description="List the resources below a logical path across all roots",
    )
    list_parser.add_argument("path", help="Logical path to list (e.g. 'db')")
    list_parser.add_argument(
        "--relative-to",
        default="",
        help="Base path the listed path is relative to",
    )
    list_parser.add_argument(
        "--no-files",
        action="store_false",
        dest="include_files",
        help="Exclude files from the listing",
    )
    list_parser.add_argument(
        "--dirs",
        action="store_true",
        dest="include_directories",
        help="Include directories in the listing",
    )
    list_parser.add_argument(
        "--recursive",
        action="store_true",
        help="List all descendants instead of direct children",
    )
    _add_common_arguments(list_parser)

    # Cat command
    cat_parser = subparsers.add_parser(
        "cat",
        help="Print resources found at a logical path",
        description="Print the contents of every resource found at a logical path",
    )
    cat_parser.add_argument("path", help="Logical path of the resource")
    cat_parser.add_argument(
        "--max-bytes",
        type=int,
        default=200_000,
        help="Maximum bytes printed per resource (default: 200000)",
    )
    _add_common_arguments(cat_parser)

    # Describe command
    describe_parser = subparsers.add_parser(
        "describe",
        help="Describe the configured roots",
        description="Print the resolver description of the configured roots",
    )
    _add_common_arguments(describe_parser)

    return parser


def build_resolver(args: argparse.Namespace) -> ResourceResolver:
    """Create a resolver from --config, --root and --encoding arguments.

    Roots from the configuration file come first, followed by --root values.

    Raises:
        ResourceAccessorError: If the configuration or a root is invalid
    """
    config = load_config(args.config) if args.config else ResolverConfig()
    if args.encoding:
        config.output_encoding = args.encoding

    roots = config.roots + args.roots
    if not roots:
        raise ResourceAccessorError("No roots configured: use --root or --config")

    audit_sink = JSONLAuditSink(args.audit_log) if args.audit_log else None
    return ResourceResolver(roots, config=config, audit_sink=audit_sink)


def cmd_list(args: argparse.Namespace) -> int:
    """Execute the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for not found or error)
    """
    try:
        resolver = build_resolver(args)

        names = resolver.list(
            args.relative_to,
            args.path,
            include_files=args.include_files,
            include_directories=args.include_directories,
            recursive=args.recursive,
        )

        if names is None:
            print(f"No resources found at {args.path}.", file=sys.stderr)
            return 1

        for name in sorted(names):
            print(name)

        return 0

    except ResourceAccessorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_cat(args: argparse.Namespace) -> int:
    """Execute the cat command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for not found or error)
    """
    try:
        resolver = build_resolver(args)
        reader = ResourceReader(max_bytes=args.max_bytes)

        streams = resolver.open_all(args.path)
        if streams is None:
            print(f"No resources found at {args.path}.", file=sys.stderr)
            return 1

        try:
            for index, stream in enumerate(streams, start=1):
                content, truncated = reader.read_text(stream)

                print(f"==> {args.path} [{index}/{len(streams)}] "
                      f"sha256={reader.compute_sha256(content)}")
                print(content)
                if truncated:
                    print(f"... truncated at {args.max_bytes} bytes")
        finally:
            for stream in streams:
                stream.close()

        return 0

    except (ResourceAccessorError, ValueError, OSError, zipfile.BadZipFile) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_describe(args: argparse.Namespace) -> int:
    """Execute the describe command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        resolver = build_resolver(args)
        print(resolver.describe())
        return 0

    except ResourceAccessorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the resource-accessor command is executed.
    It parses command-line arguments, configures logging and dispatches to
    the appropriate command handler.
    """
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Dispatch to command handler
    if args.command == "list":
        exit_code = cmd_list(args)
    elif args.command == "cat":
        exit_code = cmd_cat(args)
    elif args.command == "describe":
        exit_code = cmd_describe(args)
    else:
        parser.print_help()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
