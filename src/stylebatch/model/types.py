# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Primitive value types shared by the StyleBatch model."""

from __future__ import annotations

import hashlib
import posixpath
from enum import Enum

# ###############
# Public Interface
# ###############

PARTIAL_PREFIX = "_"
"""Basename prefix marking a file as importable only."""

STYLESHEET_EXTENSIONS: tuple[str, ...] = (".scss", ".sass")
"""Recognized stylesheet extensions, in resolution preference order."""


class OutputMode(str, Enum):
    """Formatting applied to compiled CSS."""

    COMPACT = "compact"
    EXPANDED = "expanded"


class DiagnosticKind(str, Enum):
    """Category of a per-unit failure."""

    RESOLUTION = "resolution"
    CYCLE = "cycle"
    COMPILER = "compiler"
    CANCELLED = "cancelled"


def content_hash(content: bytes) -> str:
    """Return the SHA-256 hex digest of *content*."""
    return hashlib.sha256(content).hexdigest()


def normalize_path(path: str) -> str:
    """Return the canonical logical form of a project path.

    Backslashes become forward slashes, redundant separators and ``.``
    segments are collapsed, and any leading ``/`` is dropped so that every
    logical path is relative to the project root.

    Raises:
        ValueError: If the path is empty or escapes the project root.
    """
    cleaned = path.replace("\\", "/").strip()
    if not cleaned:
        raise ValueError("Empty source path")
    normalized = posixpath.normpath(cleaned).lstrip("/")
    if normalized in ("", ".") or normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"Source path '{path}' is outside the project root")
    return normalized


def split_extension(path: str) -> tuple[str, str]:
    """Split a recognized stylesheet extension off *path*.

    Returns ``(stem, extension)``; *extension* is ``""`` when *path* does not
    end in one of :data:`STYLESHEET_EXTENSIONS`.
    """
    for ext in STYLESHEET_EXTENSIONS:
        if path.endswith(ext):
            return path[: -len(ext)], ext
    return path, ""


def is_partial_path(path: str) -> bool:
    """Return True if the basename of *path* carries the partial prefix."""
    return posixpath.basename(path).startswith(PARTIAL_PREFIX)
