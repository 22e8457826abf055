# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy of the StyleBatch compiler core.

Every per-unit error converts to a :class:`~stylebatch.model.entities.Diagnostic`
so that one failing entry never aborts its siblings.  Only
:class:`FileSetError` is allowed to abort a whole batch.
"""

from __future__ import annotations

from stylebatch.model.entities import Diagnostic
from stylebatch.model.types import DiagnosticKind

# ###############
# Public Interface
# ###############


class StyleBatchError(Exception):
    """Base class for all StyleBatch errors."""


class UnitError(StyleBatchError):
    """An error scoped to a single compilation unit."""

    kind: DiagnosticKind = DiagnosticKind.COMPILER

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source_file = source_file
        self.line = line
        self.column = column

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            kind=self.kind,
            message=self.message,
            source_file=self.source_file,
            line=self.line,
            column=self.column,
        )


class ResolutionError(UnitError):
    """An import reference could not be matched to a source file.

    Attributes:
        reference: The raw import reference.
        importer: Path of the file containing the reference.
    """

    kind = DiagnosticKind.RESOLUTION

    def __init__(
        self,
        reference: str,
        importer: str,
        *,
        line: int | None = None,
        column: int | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message or f"Cannot resolve import '{reference}' from '{importer}'",
            source_file=importer,
            line=line,
            column=column,
        )
        self.reference = reference
        self.importer = importer


class CycleError(UnitError):
    """A circular import was found while walking an entry's dependencies.

    Attributes:
        cycle: The paths forming the cycle; the first path is repeated at the end.
    """

    kind = DiagnosticKind.CYCLE

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            "Circular import detected: " + " -> ".join(cycle),
            source_file=cycle[0] if cycle else None,
        )
        self.cycle = cycle


class CompilerError(UnitError):
    """The underlying stylesheet compiler rejected the source."""

    kind = DiagnosticKind.COMPILER


class CacheIOError(StyleBatchError):
    """A persisted cache entry could not be read or written."""


class FileSetError(StyleBatchError):
    """The file set reported by the host is malformed; aborts the batch."""
