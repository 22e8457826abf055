# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the StyleBatch command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from stylebatch.compiler.backend import LibsassCompiler
from stylebatch.compiler.build import BuildContext
from stylebatch.compiler.cache import CompileCache
from stylebatch.compiler.emitter import CompiledArtifact, package_batch, write_artifacts
from stylebatch.compiler.errors import CacheIOError, FileSetError
from stylebatch.workspace.config import WorkspaceConfigError, find_workspace_config
from stylebatch.workspace.scan import TARGET_DIRECTORIES, collect_source_files

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the StyleBatch CLI."""
    parser = argparse.ArgumentParser(
        prog="stylebatch",
        description="StyleBatch - incremental batch compiler for Sass stylesheets",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Compile the stylesheets of a project",
        description="Compile every entry stylesheet, reusing cached results for unchanged inputs.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "--target",
        choices=TARGET_DIRECTORIES,
        default=None,
        help="Build target to compile for (default: all targets)",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the artifacts as JSON instead of writing them to the output directory",
    )

    # clean subcommand
    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove the persisted compile cache",
        description="Delete the compile cache directory of a project.",
    )
    clean_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "build":
        return _cmd_build(args)
    if args.command == "clean":
        return _cmd_clean(args)
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    try:
        config = find_workspace_config(directory)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        source_files = collect_source_files(directory, config)
    except FileSetError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not any(f.is_entry_for(args.target) for f in source_files):
        print("No entry stylesheets found.")
        return 0

    cache = CompileCache(directory / config.cache_directory)
    compiler = LibsassCompiler(root=directory)
    with BuildContext(config.compile_options(), cache=cache, compiler=compiler, max_workers=config.workers) as context:
        try:
            batch = context.run_batch(source_files, target=args.target)
        except FileSetError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    artifacts = package_batch(batch)
    if args.json:
        print(json.dumps([a.model_dump(mode="json") for a in artifacts], indent=2))
    else:
        out_dir = directory / config.output_directory
        write_artifacts(artifacts, out_dir)
        compiled = sum(1 for a in artifacts if isinstance(a, CompiledArtifact))
        print(
            f"Compiled {compiled} of {len(artifacts)} stylesheet(s) "
            f"({batch.cached_count} from cache) into '{out_dir}'."
        )

    for diagnostic in batch.diagnostics:
        print(f"Error: {diagnostic.format()}", file=sys.stderr)

    return 1 if batch.has_errors else 0


def _cmd_clean(args: argparse.Namespace) -> int:
    """Handle the clean subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    try:
        config = find_workspace_config(directory)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    cache_dir = directory / config.cache_directory
    if not cache_dir.exists():
        print("No compile cache found. Nothing to clean.")
        return 0

    try:
        CompileCache(cache_dir).clear()
    except CacheIOError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Removed compile cache at '{cache_dir}'.")
    return 0
