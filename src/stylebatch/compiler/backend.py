# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Adapters over the underlying stylesheet compiler.

The compiler is a black box to the rest of StyleBatch: it receives one entry
file, the compile options and a *loader* that serves imports from the batch's
file set, and returns compiled CSS or raises :class:`CompilerError`.
"""

from __future__ import annotations

import base64
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import sass

from stylebatch.compiler.errors import CompilerError
from stylebatch.model.entities import CompileOptions, SourceFile
from stylebatch.model.types import OutputMode

# ###############
# Public Interface
# ###############

Loader = Callable[[str, str], tuple[str, str] | None]
"""Serves an import: ``(reference, importer_path) -> (resolved_path, text)``.

Returns None for references the compiler must resolve on its own.
"""


@dataclass(frozen=True)
class CompileOutput:
    """Compiled CSS and, when requested, its source map as a JSON string."""

    css: str
    source_map: str | None = None


class StylesheetCompiler(Protocol):
    """Interface of the black-box compiler."""

    def compile(self, source: SourceFile, options: CompileOptions, loader: Loader) -> CompileOutput:
        """Compile *source*.

        Raises:
            CompilerError: If the compiler rejects the source.
        """
        ...


class LibsassCompiler:
    """Compiles stylesheets in memory with libsass.

    libsass implements @import only.  @use and @forward references still
    become dependency edges and cache key inputs, but compiling an entry that
    uses them ends in a compiler diagnostic.

    Args:
        root: Optional project root on disk.  When given, include paths are
            also handed to libsass so that references the loader declines
            (such as ``~`` bare modules) can be found on the filesystem.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root

    def compile(self, source: SourceFile, options: CompileOptions, loader: Loader) -> CompileOutput:
        def importer(path: str, prev: str) -> list[tuple[str, str]] | None:
            importer_path = source.path if prev in ("", "stdin") else prev
            loaded = loader(path, importer_path)
            if loaded is None:
                return None
            return [loaded]

        kwargs: dict[str, object] = {
            "string": source.text(),
            "output_style": _OUTPUT_STYLES[options.output_mode],
            "indented": source.is_indented,
            "importers": [(0, importer)],
        }
        if self.root is not None:
            kwargs["include_paths"] = [str(self.root / p) for p in options.include_paths]
        if options.source_maps:
            kwargs["source_map_embed"] = True
            kwargs["source_map_contents"] = True

        try:
            css = sass.compile(**kwargs)
        except sass.CompileError as exc:
            raise _compiler_error(str(exc), source.path) from exc

        if options.source_maps:
            return CompileOutput(*_split_embedded_map(css))
        return CompileOutput(css)


# ################
# Implementation
# ################

_OUTPUT_STYLES: dict[OutputMode, str] = {
    OutputMode.COMPACT: "compressed",
    OutputMode.EXPANDED: "expanded",
}

_POSITION_RE = re.compile(r"on line (\d+):(\d+) of (\S+)")
_EMBEDDED_MAP_RE = re.compile(
    r"\s*/\*# sourceMappingURL=data:application/json;(?:charset=utf-8;)?base64,([A-Za-z0-9+/=]+) \*/\s*$"
)


def _compiler_error(message: str, entry_path: str) -> CompilerError:
    """Build a CompilerError carrying the message and position libsass reported."""
    message = message.strip()
    match = _POSITION_RE.search(message)
    if match is None:
        return CompilerError(message, source_file=entry_path)
    reported = match.group(3)
    return CompilerError(
        message,
        source_file=entry_path if reported == "stdin" else reported,
        line=int(match.group(1)),
        column=int(match.group(2)),
    )


def _split_embedded_map(css: str) -> tuple[str, str | None]:
    """Separate an embedded base64 source map comment from compiled CSS."""
    match = _EMBEDDED_MAP_RE.search(css)
    if match is None:
        return css, None
    source_map = base64.b64decode(match.group(1)).decode("utf-8")
    return css[: match.start()] + "\n", source_map
