# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import dependency graph over the file set of one batch.

The graph is rebuilt for every batch and never persisted.  Construction does
not fail on bad imports: unresolved references are recorded against the file
that contains them and surface only when an entry's transitive closure walks
through that file.  Cycles are likewise reported per entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from stylebatch.compiler.errors import CycleError, ResolutionError
from stylebatch.compiler.resolver import ImportResolver
from stylebatch.model.entities import SourceFile
from stylebatch.parser.scanner import ScanError, scan_imports

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class DependencyGraph:
    """Directed import graph: each file maps to the files it imports directly.

    Attributes:
        files: All files of the batch keyed by path.
        edges: Direct imports per file, in first-import order, without duplicates.
        problems: Resolution failures per importing file.
    """

    def __init__(
        self,
        files: dict[str, SourceFile],
        edges: dict[str, list[str]],
        problems: dict[str, list[ResolutionError]],
    ) -> None:
        self.files = files
        self.edges = edges
        self.problems = problems
        self._closures: dict[str, tuple[str, ...]] = {}

    @classmethod
    def build(
        cls,
        source_files: Iterable[SourceFile],
        resolver: ImportResolver | None = None,
        include_paths: Sequence[str] = (),
    ) -> DependencyGraph:
        """Scan every file for imports and resolve them into edges.

        Args:
            source_files: The files of the batch.
            resolver: Resolver to use; defaults to one over *source_files*.
            include_paths: Directories searched after the importer's directory.
        """
        files = {f.path: f for f in source_files}
        if resolver is None:
            resolver = ImportResolver(files)

        edges: dict[str, list[str]] = {}
        problems: dict[str, list[ResolutionError]] = {}
        for path, source in files.items():
            targets: list[str] = []
            try:
                references = scan_imports(source.text(), indented=source.is_indented)
            except ScanError as exc:
                problems.setdefault(path, []).append(
                    ResolutionError(
                        "",
                        path,
                        line=exc.line,
                        column=exc.column,
                        message=f"Cannot scan imports: {exc.message}",
                    )
                )
                references = []
            for ref in references:
                try:
                    resolved = resolver.resolve(path, ref.target, include_paths, line=ref.line, column=ref.column)
                except ResolutionError as exc:
                    problems.setdefault(path, []).append(exc)
                    continue
                if resolved is not None and resolved.path not in targets:
                    targets.append(resolved.path)
            edges[path] = targets

        logger.debug(
            "Built dependency graph: %d files, %d edges, %d files with unresolved imports",
            len(files),
            sum(len(t) for t in edges.values()),
            len(problems),
        )
        return cls(files, edges, problems)

    def direct_dependencies(self, path: str) -> list[str]:
        return list(self.edges.get(path, ()))

    def transitive_closure(self, entry: str) -> tuple[str, ...]:
        """Return every file reachable from *entry*, in depth-first pre-order.

        The entry itself is not part of its closure.  Results are memoized
        for the lifetime of the graph.

        Raises:
            CycleError: If a file is reached again while it is still on the
                current traversal path.
            ResolutionError: If any file in the closure, the entry included,
                has an unresolved import.
        """
        return self._closure(entry, [])

    def dependents(self, path: str) -> list[str]:
        """Return every file whose transitive closure contains *path*, sorted."""
        reverse: dict[str, list[str]] = {}
        for importer, targets in self.edges.items():
            for target in targets:
                reverse.setdefault(target, []).append(importer)

        found: set[str] = set()
        pending = list(reverse.get(path, ()))
        while pending:
            current = pending.pop()
            if current in found:
                continue
            found.add(current)
            pending.extend(reverse.get(current, ()))
        found.discard(path)
        return sorted(found)

    # ################
    # Implementation
    # ################

    def _closure(self, path: str, stack: list[str]) -> tuple[str, ...]:
        cached = self._closures.get(path)
        if cached is not None:
            return cached

        problems = self.problems.get(path)
        if problems:
            raise problems[0]

        stack.append(path)
        try:
            ordered: dict[str, None] = {}
            for dep in self.edges.get(path, ()):
                if dep in stack:
                    raise CycleError(stack[stack.index(dep) :] + [dep])
                ordered.setdefault(dep, None)
                for sub in self._closure(dep, stack):
                    ordered.setdefault(sub, None)
        finally:
            stack.pop()

        result = tuple(ordered)
        self._closures[path] = result
        return result
