# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Batch compiler driver.

A batch takes the complete file set reported by the host and produces exactly
one outcome per eligible entry file:

1. Select the entries: files visible to the build target that are entry
   candidates and not partials.
2. Build the dependency graph over the visible files.
3. Compute each entry's cache key from its transitive closure and serve
   cache hits directly.
4. Compile the remaining entries on a bounded thread pool.  Entries do not
   depend on each other's output, so they are dispatched without ordering
   constraints and joined before the batch is finalized.
5. Store every compiled outcome, success or failure, in the cache.

Resolution errors, import cycles and compiler failures are recorded as a
diagnostic of the affected entry; they never stop sibling entries.  Only a
malformed file set (:class:`FileSetError`) aborts the batch.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from stylebatch.compiler.backend import LibsassCompiler, Loader, StylesheetCompiler
from stylebatch.compiler.cache import CompileCache, compute_cache_key
from stylebatch.compiler.errors import CompilerError, CycleError, FileSetError, ResolutionError, UnitError
from stylebatch.compiler.graph import DependencyGraph
from stylebatch.compiler.resolver import ImportResolver
from stylebatch.model.entities import CacheEntry, CompileOptions, Diagnostic, SourceFile
from stylebatch.model.types import DiagnosticKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class UnitResult:
    """The outcome of one compilation unit.

    Attributes:
        path: Path of the entry file.
        target: Build target of the batch.
        cache_key: The unit's cache key, or None when the key could not be
            computed because the entry's imports failed to resolve or form a
            cycle.
        entry: Compiled output or diagnostic.
        from_cache: True when no compilation was performed for this unit.
        crashed: True when the compiler raised an unexpected exception.
    """

    path: str
    target: str | None
    cache_key: str | None
    entry: CacheEntry
    from_cache: bool = False
    crashed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.entry.succeeded

    @property
    def diagnostic(self) -> Diagnostic | None:
        return self.entry.diagnostic


@dataclass
class BatchResult:
    """Result of a batch: one UnitResult per eligible entry, ordered by path.

    Attributes:
        results: Outcomes of every eligible entry.
        diagnostics: Diagnostics of the failed entries, in result order.
    """

    results: list[UnitResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any unit failed."""
        return len(self.diagnostics) > 0

    @property
    def compiled_count(self) -> int:
        return sum(
            1
            for r in self.results
            if not r.from_cache
            and not r.crashed
            and r.cache_key is not None
            and (r.diagnostic is None or r.diagnostic.kind != DiagnosticKind.CANCELLED)
        )

    @property
    def cached_count(self) -> int:
        return sum(1 for r in self.results if r.from_cache)

    def get(self, path: str) -> UnitResult | None:
        """Return the result for entry *path*, or None if it was not an entry."""
        for result in self.results:
            if result.path == path:
                return result
        return None


class BuildContext:
    """Per-build state: compile options, cache, compiler and worker pool.

    A context may run any number of batches; the cache carries over between
    them while the dependency graph is rebuilt every time.  Use it as a
    context manager, or call :meth:`close`, to shut the worker pool down.

    Args:
        options: Compile options applied to every unit.
        cache: Compile cache; a fresh in-memory cache when omitted.
        compiler: Underlying compiler; libsass when omitted.
        max_workers: Size of the worker pool; the executor default when omitted.
    """

    def __init__(
        self,
        options: CompileOptions | None = None,
        *,
        cache: CompileCache | None = None,
        compiler: StylesheetCompiler | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.options = options if options is not None else CompileOptions()
        self.cache = cache if cache is not None else CompileCache()
        self.compiler = compiler if compiler is not None else LibsassCompiler()
        self.graph: DependencyGraph | None = None
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="stylebatch")
        self._cancelled = threading.Event()
        self._futures: list[Future[UnitResult | None]] = []
        self._closed = False

    def __enter__(self) -> BuildContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Wait for running compilations and release the worker pool."""
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=True)

    def cancel(self) -> None:
        """Abort the running batch.

        Units that have not started are reported as cancelled.  Units that
        are already compiling run to completion so that their cache entries
        are written whole.
        """
        self._cancelled.set()
        for future in list(self._futures):
            future.cancel()

    def run_batch(self, source_files: Iterable[SourceFile], target: str | None = None) -> BatchResult:
        """Compile every eligible entry of *source_files* for *target*.

        Args:
            source_files: The complete file set of the build.
            target: Build target; None compiles for every target.

        Returns:
            A BatchResult with one outcome per eligible entry.

        Raises:
            FileSetError: If the file set reports the same path twice.
            RuntimeError: If the context has been closed.
        """
        if self._closed:
            raise RuntimeError("BuildContext is closed")
        self._cancelled.clear()

        files = _index_files(source_files)
        visible = {path: f for path, f in files.items() if f.is_visible_to(target)}
        resolver = ImportResolver(visible)
        graph = DependencyGraph.build(visible.values(), resolver, self.options.include_paths)
        self.graph = graph

        entries = sorted(path for path, f in visible.items() if f.is_entry_for(target))
        outcomes: dict[str, UnitResult] = {}
        pending: dict[str, tuple[str, tuple[str, ...]]] = {}

        for path in entries:
            source = visible[path]
            try:
                closure = graph.transitive_closure(path)
            except (ResolutionError, CycleError) as exc:
                logger.debug("Cannot compile %s: %s", path, exc)
                outcomes[path] = _failed_unit(path, target, exc)
                continue
            key = compute_cache_key(source, [visible[dep] for dep in closure], self.options)
            cached = self.cache.lookup(key)
            if cached is not None:
                logger.debug("Cache hit for %s (%s)", path, key[:12])
                outcomes[path] = UnitResult(path, target, key, _attribute(cached, path), from_cache=True)
            else:
                logger.debug("Cache miss for %s (%s)", path, key[:12])
                pending[path] = (key, closure)

        loader = self._loader(resolver)
        by_future: dict[Future[UnitResult | None], str] = {}
        self._futures = []
        for path, (key, closure) in pending.items():
            future = self._executor.submit(self._compile_unit, visible[path], target, key, closure, loader)
            by_future[future] = path
            self._futures.append(future)

        wait(by_future)
        for future, path in by_future.items():
            outcomes[path] = self._collect(future, path, target, pending[path][0])
        self._futures = []

        result = BatchResult()
        for path in entries:
            unit = outcomes[path]
            result.results.append(unit)
            if unit.diagnostic is not None:
                result.diagnostics.append(unit.diagnostic)

        logger.info(
            "Batch for target %s: %d entries, %d compiled, %d cached, %d failed",
            target or "<all>",
            len(entries),
            result.compiled_count,
            result.cached_count,
            len(result.diagnostics),
        )
        return result

    # ################
    # Implementation
    # ################

    def _loader(self, resolver: ImportResolver) -> Loader:
        """Return a loader serving imports from the batch's file set."""
        include_paths = self.options.include_paths

        def load(reference: str, importer_path: str) -> tuple[str, str] | None:
            try:
                found = resolver.resolve(importer_path, reference, include_paths)
            except ResolutionError:
                return None
            if found is None:
                return None
            return found.path, found.text()

        return load

    def _compile_unit(
        self,
        source: SourceFile,
        target: str | None,
        key: str,
        closure: tuple[str, ...],
        loader: Loader,
    ) -> UnitResult | None:
        """Compile one unit on a worker thread; None means it was cancelled."""
        if self._cancelled.is_set():
            return None

        def compile_once() -> CacheEntry:
            logger.debug("Compiling %s", source.path)
            try:
                output = self.compiler.compile(source, self.options, loader)
            except CompilerError as exc:
                if exc.source_file == source.path:
                    exc.source_file = None
                return CacheEntry(dependencies=closure, diagnostic=exc.to_diagnostic())
            source_map = output.source_map if self.options.source_maps else None
            return CacheEntry(css=output.css, source_map=source_map, dependencies=closure)

        entry, computed = self.cache.get_or_compute(key, compile_once)
        return UnitResult(source.path, target, key, _attribute(entry, source.path), from_cache=not computed)

    def _collect(self, future: Future[UnitResult | None], path: str, target: str | None, key: str) -> UnitResult:
        """Turn a finished or cancelled future into the unit's outcome."""
        if future.cancelled():
            return _cancelled_unit(path, target, key)
        try:
            unit = future.result()
        except Exception as exc:
            logger.exception("Compiler crashed on %s", path)
            error = CompilerError(f"Compiler crashed: {exc}", source_file=path)
            return UnitResult(path, target, key, CacheEntry(diagnostic=error.to_diagnostic()), crashed=True)
        if unit is None:
            return _cancelled_unit(path, target, key)
        return unit


def run_batch(
    source_files: Iterable[SourceFile],
    options: CompileOptions | None = None,
    *,
    target: str | None = None,
    cache: CompileCache | None = None,
    compiler: StylesheetCompiler | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Run a single batch in a throwaway :class:`BuildContext`.

    Pass a long-lived *cache* to reuse results across calls.
    """
    with BuildContext(options, cache=cache, compiler=compiler, max_workers=max_workers) as context:
        return context.run_batch(source_files, target=target)


def _index_files(source_files: Iterable[SourceFile]) -> dict[str, SourceFile]:
    """Key the file set by path.

    Raises:
        FileSetError: If a path is reported more than once.
    """
    files: dict[str, SourceFile] = {}
    for source in source_files:
        if source.path in files:
            raise FileSetError(f"Source file '{source.path}' is reported more than once")
        files[source.path] = source
    return files


def _failed_unit(path: str, target: str | None, error: UnitError) -> UnitResult:
    return UnitResult(path, target, None, CacheEntry(diagnostic=error.to_diagnostic()))


def _cancelled_unit(path: str, target: str | None, key: str) -> UnitResult:
    diagnostic = Diagnostic(kind=DiagnosticKind.CANCELLED, message="Compilation cancelled", source_file=path)
    return UnitResult(path, target, key, CacheEntry(diagnostic=diagnostic))


def _attribute(entry: CacheEntry, path: str) -> CacheEntry:
    """Attribute a diagnostic stored without a file to the requesting entry.

    Entries with identical inputs share one cache entry, so a failure in the
    entry file itself is stored without its path.
    """
    if entry.diagnostic is None or entry.diagnostic.source_file is not None:
        return entry
    diagnostic = entry.diagnostic.model_copy(update={"source_file": path})
    return entry.model_copy(update={"diagnostic": diagnostic})
