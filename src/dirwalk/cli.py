#!/usr/bin/env python3
"""
dirwalk: List or package every file below a directory

Common usage:
  dirwalk build/classes
  dirwalk --relative build/classes
  dirwalk --archive app.zip build/classes build/resources
  dirwalk --archive app.zip --main com.example.Handler build/classes

Settings can also come from `.dirwalk.toml`, `dirwalk.toml`, or
`pyproject.toml [tool.dirwalk]`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from dirwalk.config import find_config_file, load_config, merge_cli_with_config
from dirwalk.defaults import DEFAULT_COMPRESSION, DEFAULT_EXCLUDES
from dirwalk.handler import HandlerInit
from dirwalk.packager import COMPRESSION_METHODS, package_directories
from dirwalk.walker import DirWalker


@dataclass
class Options:
    """Command-line options for the dirwalk tool."""

    roots: list[str]
    relative: bool
    archive: str | None
    main: str | None
    exclude: list[str] | None
    extend_exclude: list[str]
    compression: str
    verbose: bool
    version: bool

    @property
    def effective_exclude(self) -> list[str]:
        """Defaults (or `exclude`) plus `extend_exclude`."""
        base = self.exclude if self.exclude is not None else list(DEFAULT_EXCLUDES)
        return base + self.extend_exclude


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` holds the options
    the user actually passed, so config file values don't override them.
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "roots",
        nargs="*",
        type=str,
        default=[],
        help="Directories to walk",
    )
    parser.add_argument(
        "-r",
        "--relative",
        action="store_true",
        default=False,
        help="Print paths relative to their root directory",
    )
    parser.add_argument(
        "-a",
        "--archive",
        type=str,
        default=None,
        metavar="FILE",
        help="Package all files into this zip archive instead of listing them",
    )
    parser.add_argument(
        "--main",
        type=str,
        default=None,
        metavar="ENTRY",
        help="Handler entry point; prints a JSON init record for the archive (needs --archive)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace the default packaging exclusions. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Add to the default packaging exclusions (e.g., 'tmp/'). Can be repeated",
    )
    parser.add_argument(
        "--compression",
        type=str,
        choices=sorted(COMPRESSION_METHODS),
        default=DEFAULT_COMPRESSION,
        help="Zip compression method (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("-r", "--relative", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("--main", default=_SENTINEL)
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument("--extend-exclude", action="append", default=None)
    sentinel_parser.add_argument("--compression", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for name in ("relative", "main", "compression"):
        if getattr(sentinel_opts, name) is not _SENTINEL:
            explicit_flags.add(name)
    # For append actions, None means not supplied
    for name in ("exclude", "extend_exclude"):
        if getattr(sentinel_opts, name) is not None:
            explicit_flags.add(name)

    return (
        Options(
            roots=opts.roots,
            relative=opts.relative,
            archive=opts.archive,
            main=opts.main,
            exclude=opts.exclude,
            extend_exclude=opts.extend_exclude,
            compression=opts.compression,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _list_files(options: Options) -> None:
    """Print files as the walkers find them, one per line."""
    for root in options.roots:
        walker = DirWalker(root)
        while walker.has_next():
            file = walker.next()
            print(walker.relative_path(file) if options.relative else file)


def _package(options: Options) -> None:
    assert options.archive is not None
    result = package_directories(
        options.roots,
        options.archive,
        exclude=options.effective_exclude,
        compression=options.compression,
    )
    print(
        f"Wrote {len(result.entries)} entries to {result.output}"
        f" ({len(result.skipped)} skipped)"
    )
    if options.main:
        init = HandlerInit.for_archive(result.output, options.main)
        print(json.dumps(init.to_dict()))


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the dirwalk CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("dirwalk")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not options.roots:
        print(
            "Error: No directory specified. Use '.' for the current directory,"
            " --help for more options.",
            file=sys.stderr,
        )
        return 1

    config_path = find_config_file(Path.cwd())
    if config_path:
        try:
            config = load_config(config_path)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        merge_cli_with_config(options, config, explicit_flags)

    if "main" in explicit_flags and not options.archive:
        print("Error: --main requires --archive", file=sys.stderr)
        return 1

    try:
        if options.archive:
            _package(options)
        else:
            _list_files(options)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
