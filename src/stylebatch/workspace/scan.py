# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reference host: enumerates the stylesheets of a project directory."""

from __future__ import annotations

import fnmatch
from pathlib import Path

from stylebatch.compiler.errors import FileSetError
from stylebatch.model.entities import SourceFile
from stylebatch.model.types import STYLESHEET_EXTENSIONS
from stylebatch.workspace.config import WorkspaceConfig

# ###############
# Public Interface
# ###############

TARGET_DIRECTORIES: tuple[str, ...] = ("client", "server")
"""Directory names that tag the files below them with a build target."""


def collect_source_files(root: Path, config: WorkspaceConfig) -> list[SourceFile]:
    """Return every stylesheet below *root*, sorted by path.

    Hidden directories, ``node_modules`` and the configured cache and output
    directories are skipped.  A file below a ``client`` or ``server``
    directory is tagged with that target; every other file is neutral.

    Raises:
        FileSetError: If a stylesheet cannot be read.
    """
    skipped = {(root / config.cache_directory).resolve(), (root / config.output_directory).resolve()}
    files: list[SourceFile] = []
    for path in sorted(root.rglob("*")):
        if path.suffix not in STYLESHEET_EXTENSIONS or not path.is_file():
            continue
        rel = path.relative_to(root)
        if any(_is_ignored_dir(part) for part in rel.parts[:-1]):
            continue
        if any(skip in path.resolve().parents for skip in skipped):
            continue
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileSetError(f"Cannot read source file '{path}': {exc}") from exc
        logical = rel.as_posix()
        files.append(
            SourceFile(
                path=logical,
                content=content,
                target=_target_for(rel.parts[:-1]),
                is_entry_candidate=not _matches_any(logical, config.import_only),
            )
        )
    return files


# ################
# Implementation
# ################


def _is_ignored_dir(name: str) -> bool:
    return name.startswith(".") or name == "node_modules"


def _target_for(directories: tuple[str, ...]) -> str | None:
    for name in directories:
        if name in TARGET_DIRECTORIES:
            return name
    return None


def _matches_any(path: str, patterns: list[str]) -> bool:
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns)
