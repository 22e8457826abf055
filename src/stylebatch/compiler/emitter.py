# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Packaging of unit results into artifacts handed to the host build system."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from stylebatch.compiler.build import BatchResult, UnitResult
from stylebatch.model.entities import Diagnostic
from stylebatch.model.types import is_partial_path, split_extension

# ###############
# Public Interface
# ###############


class CompiledArtifact(BaseModel):
    """A successfully compiled entry.

    Attributes:
        path: Path of the entry file.
        output_path: Path of the stylesheet to emit (the entry with ``.css``).
        compiled_text: The compiled CSS.
        source_map: Source map JSON, when source maps were requested.
        watched_dependency_paths: Transitive dependencies of the entry, for
            the host to register as watch targets.
    """

    kind: Literal["compiled"] = "compiled"
    path: str
    output_path: str
    compiled_text: str
    source_map: str | None = None
    watched_dependency_paths: list[str]


class FailedArtifact(BaseModel):
    """An entry that produced no stylesheet."""

    kind: Literal["failed"] = "failed"
    path: str
    diagnostic: Diagnostic


HostArtifact = CompiledArtifact | FailedArtifact


def package(result: UnitResult) -> HostArtifact:
    """Package one unit result for the host.

    Raises:
        ValueError: If *result* belongs to a partial, which is never an entry.
    """
    if is_partial_path(result.path):
        raise ValueError(f"Partial '{result.path}' cannot produce an artifact")
    entry = result.entry
    if entry.diagnostic is not None:
        return FailedArtifact(path=result.path, diagnostic=entry.diagnostic)
    if entry.css is None:
        raise ValueError(f"Result for '{result.path}' has neither CSS nor a diagnostic")
    return CompiledArtifact(
        path=result.path,
        output_path=output_path_for(result.path),
        compiled_text=entry.css,
        source_map=entry.source_map,
        watched_dependency_paths=list(entry.dependencies),
    )


def package_batch(batch: BatchResult) -> list[HostArtifact]:
    """Package every unit of *batch*, in result order."""
    return [package(result) for result in batch.results]


def output_path_for(path: str) -> str:
    """Return the stylesheet path emitted for entry *path*."""
    stem, _ = split_extension(path)
    return stem + ".css"


def write_artifacts(artifacts: list[HostArtifact], out_dir: Path) -> list[Path]:
    """Write compiled stylesheets (and source maps) below *out_dir*.

    Failed artifacts are skipped.

    Returns:
        The paths written, in artifact order.
    """
    written: list[Path] = []
    for artifact in artifacts:
        if not isinstance(artifact, CompiledArtifact):
            continue
        css_path = out_dir / artifact.output_path
        css_path.parent.mkdir(parents=True, exist_ok=True)
        css_path.write_text(artifact.compiled_text, encoding="utf-8")
        written.append(css_path)
        if artifact.source_map is not None:
            map_path = css_path.with_name(css_path.name + ".map")
            map_path.write_text(artifact.source_map, encoding="utf-8")
            written.append(map_path)
    return written
