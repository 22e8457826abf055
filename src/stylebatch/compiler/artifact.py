# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of persisted cache entries.

Entries are stored as compact JSON documents.  The format is versioned so
that entries written by an incompatible release are detected and ignored.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from stylebatch.model.entities import CacheEntry, Diagnostic
from stylebatch.model.types import DiagnosticKind

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".json"


def serialize(entry: CacheEntry) -> str:
    """Serialize a CacheEntry to a compact JSON string."""
    return json.dumps(_entry_to_dict(entry), separators=(",", ":"))


def deserialize(data: str) -> CacheEntry:
    """Deserialize a CacheEntry from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`CacheEntry`.

    Raises:
        ValueError: If the data is not valid JSON, the format version is not
            recognised, or required fields are missing.
    """
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError("Cache artifact must be a JSON object")
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    try:
        return _entry_from_dict(obj)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed cache artifact: {exc}") from exc


def write_artifact(entry: CacheEntry, path: Path) -> None:
    """Write *entry* to *path* atomically, creating parent directories as needed.

    The document is written to a temporary file in the same directory and
    renamed into place, so readers never observe a partially written entry.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(serialize(entry))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_artifact(path: Path) -> CacheEntry:
    """Read and deserialize a cache entry from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _entry_to_dict(entry: CacheEntry) -> dict[str, Any]:
    d: dict[str, Any] = {"v": ARTIFACT_FORMAT_VERSION, "deps": list(entry.dependencies)}
    if entry.css is not None:
        d["css"] = entry.css
    if entry.source_map is not None:
        d["map"] = entry.source_map
    if entry.diagnostic is not None:
        d["diag"] = _diagnostic_to_dict(entry.diagnostic)
    return d


def _entry_from_dict(obj: dict[str, Any]) -> CacheEntry:
    diag = obj.get("diag")
    return CacheEntry(
        css=obj.get("css"),
        source_map=obj.get("map"),
        dependencies=tuple(obj["deps"]),
        diagnostic=_diagnostic_from_dict(diag) if diag is not None else None,
    )


def _diagnostic_to_dict(diag: Diagnostic) -> dict[str, Any]:
    d: dict[str, Any] = {"k": diag.kind.value, "msg": diag.message}
    if diag.source_file is not None:
        d["file"] = diag.source_file
    if diag.line is not None:
        d["line"] = diag.line
    if diag.column is not None:
        d["col"] = diag.column
    return d


def _diagnostic_from_dict(obj: dict[str, Any]) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind(obj["k"]),
        message=obj["msg"],
        source_file=obj.get("file"),
        line=obj.get("line"),
        column=obj.get("col"),
    )
