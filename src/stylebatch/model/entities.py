# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Core entities exchanged between the host and the StyleBatch compiler core."""

from __future__ import annotations

import posixpath

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic import Field as _Field

from stylebatch.model.types import (
    DiagnosticKind,
    OutputMode,
    content_hash,
    is_partial_path,
    normalize_path,
    split_extension,
)

# ###############
# Public Interface
# ###############


class SourceFile(BaseModel):
    """A stylesheet reported by the host.

    Attributes:
        path: Normalized logical path relative to the project root.
        content: Raw file bytes.
        content_hash: SHA-256 hex digest of *content*; computed when omitted.
        target: Build target the file belongs to, or None for neutral files
            visible to every target.
        is_entry_candidate: False for files the host marks as import-only.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: bytes
    content_hash: str = ""
    target: str | None = None
    is_entry_candidate: bool = True

    @field_validator("path")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_path(value)

    @model_validator(mode="before")
    @classmethod
    def _fill_hash(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("content_hash") and isinstance(data.get("content"), bytes):
            data = {**data, "content_hash": content_hash(data["content"])}
        return data

    @classmethod
    def from_text(
        cls,
        path: str,
        text: str,
        *,
        target: str | None = None,
        is_entry_candidate: bool = True,
    ) -> SourceFile:
        """Build a SourceFile from UTF-8 text."""
        return cls(
            path=path,
            content=text.encode("utf-8"),
            target=target,
            is_entry_candidate=is_entry_candidate,
        )

    @property
    def is_partial(self) -> bool:
        return is_partial_path(self.path)

    @property
    def is_indented(self) -> bool:
        """True for files in the indented ``.sass`` syntax."""
        return split_extension(self.path)[1] == ".sass"

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def is_visible_to(self, target: str | None) -> bool:
        """Return True if the file takes part in a batch for *target*."""
        return self.target is None or target is None or self.target == target

    def is_entry_for(self, target: str | None) -> bool:
        """Return True if the file compiles standalone for *target*."""
        return self.is_entry_candidate and not self.is_partial and self.is_visible_to(target)


class CompileOptions(BaseModel):
    """Global options that influence compiled output and therefore cache keys."""

    model_config = ConfigDict(frozen=True)

    include_paths: tuple[str, ...] = ()
    output_mode: OutputMode = OutputMode.EXPANDED
    source_maps: bool = False

    @field_validator("include_paths")
    @classmethod
    def _normalize_include_paths(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_path(p) for p in value)


class Diagnostic(BaseModel):
    """A failure scoped to one compilation unit."""

    kind: DiagnosticKind
    message: str
    source_file: str | None = None
    line: int | None = None
    column: int | None = None

    def format(self) -> str:
        """Render as ``file:line:column: message``, omitting unknown parts."""
        location = self.source_file or ""
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.message}" if location else self.message


class CacheEntry(BaseModel):
    """The stored outcome of compiling one cache key.

    Exactly one of *css* and *diagnostic* is set.
    """

    model_config = ConfigDict(frozen=True)

    css: str | None = None
    source_map: str | None = None
    dependencies: tuple[str, ...] = _Field(default_factory=tuple)
    diagnostic: Diagnostic | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> CacheEntry:
        if (self.css is None) == (self.diagnostic is None):
            raise ValueError("A cache entry needs exactly one of css and diagnostic")
        return self

    @property
    def succeeded(self) -> bool:
        return self.diagnostic is None
