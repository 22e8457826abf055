# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model for StyleBatch (source files, options, diagnostics, cache entries)."""

from stylebatch.model.entities import CacheEntry, CompileOptions, Diagnostic, SourceFile
from stylebatch.model.types import (
    PARTIAL_PREFIX,
    STYLESHEET_EXTENSIONS,
    DiagnosticKind,
    OutputMode,
    content_hash,
    is_partial_path,
    normalize_path,
    split_extension,
)

__all__ = [
    # Primitive types
    "PARTIAL_PREFIX",
    "STYLESHEET_EXTENSIONS",
    "DiagnosticKind",
    "OutputMode",
    "content_hash",
    "is_partial_path",
    "normalize_path",
    "split_extension",
    # Entities
    "SourceFile",
    "CompileOptions",
    "Diagnostic",
    "CacheEntry",
]
