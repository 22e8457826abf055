# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Content-addressable compile cache.

A cache key is a digest of an entry file, the content of everything it
transitively imports and the compile options.  Entries are never mutated:
when any input changes the key changes and the old entry simply becomes
unreachable.

The cache lives in memory and, when a directory is given, is mirrored to disk
as one JSON document per key so that it survives process restarts.  Disk
problems are logged and degrade to memory-only behaviour; they never fail a
build.

:meth:`CompileCache.get_or_compute` deduplicates concurrent work: while one
thread compiles a key, every other requester of that key blocks on the same
future and receives the same entry.
"""

from __future__ import annotations

import hashlib
import logging
import re
import shutil
import threading
from collections import OrderedDict
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from pathlib import Path

from stylebatch.compiler.artifact import ARTIFACT_SUFFIX, read_artifact, write_artifact
from stylebatch.compiler.errors import CacheIOError
from stylebatch.model.entities import CacheEntry, CompileOptions, SourceFile

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CACHE_KEY_VERSION = "2"


def compute_cache_key(
    entry: SourceFile,
    dependencies: Sequence[SourceFile],
    options: CompileOptions,
) -> str:
    """Return the cache key of compiling *entry* with *options*.

    The key is a pure function of the entry's content hash, the ordered
    paths and content hashes of its transitive dependencies, and the options.
    The entry's own path is not part of it, so identical entries share one
    compilation.  Every field is length-delimited so distinct inputs cannot
    collide by concatenation.
    """
    digest = hashlib.sha256()

    def feed(*parts: str) -> None:
        for part in parts:
            encoded = part.encode("utf-8")
            digest.update(str(len(encoded)).encode("ascii"))
            digest.update(b":")
            digest.update(encoded)

    feed("stylebatch", CACHE_KEY_VERSION, entry.content_hash)
    feed(str(len(dependencies)))
    for dep in dependencies:
        feed(dep.path, dep.content_hash)
    feed(str(len(options.include_paths)), *options.include_paths)
    feed(options.output_mode.value, "map" if options.source_maps else "nomap")
    return digest.hexdigest()


class CompileCache:
    """Thread-safe store of compiled outcomes keyed by cache key.

    Args:
        directory: Optional directory for persisted entries.
        max_entries: Optional bound on in-memory entries; least recently used
            entries are dropped first.  Persisted entries are not evicted.
    """

    def __init__(self, directory: Path | None = None, *, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be a positive integer")
        self.directory = directory
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: dict[str, Future[CacheEntry]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def lookup(self, key: str) -> CacheEntry | None:
        """Return the entry stored under *key*, or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                return entry
        if self.directory is None:
            return None

        try:
            entry = self._read(key)
        except CacheIOError as exc:
            logger.warning("Ignoring unreadable cache entry: %s", exc)
            return None
        if entry is not None:
            with self._lock:
                self._remember(key, entry)
        return entry

    def store(self, key: str, entry: CacheEntry) -> None:
        """Store *entry* under *key*.

        Storing an equal entry again is a no-op; a different entry replaces
        the old one.  The entry becomes visible to readers as a whole.
        """
        with self._lock:
            if self._entries.get(key) == entry:
                return
            self._remember(key, entry)
        if self.directory is None:
            return

        try:
            self._write(key, entry)
        except CacheIOError as exc:
            logger.warning("Keeping cache entry in memory only: %s", exc)

    def get_or_compute(self, key: str, compute: Callable[[], CacheEntry]) -> tuple[CacheEntry, bool]:
        """Return the entry for *key*, invoking *compute* at most once per key.

        Returns:
            A tuple ``(entry, computed)`` where *computed* is True only for
            the caller whose *compute* produced the entry.

        Raises:
            Exception: Whatever *compute* raised, re-raised in every caller
                waiting on that computation.
        """
        entry = self.lookup(key)
        if entry is not None:
            return entry, False

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                return entry, False
            future = self._in_flight.get(key)
            owner = future is None
            if future is None:
                future = Future()
                self._in_flight[key] = future

        if not owner:
            logger.debug("Waiting for in-flight compilation of %s", key[:12])
            return future.result(), False

        try:
            entry = compute()
        except BaseException as exc:
            with self._lock:
                del self._in_flight[key]
            future.set_exception(exc)
            raise

        self.store(key, entry)
        with self._lock:
            del self._in_flight[key]
        future.set_result(entry)
        return entry, True

    def clear(self) -> None:
        """Drop every in-memory and persisted entry.

        Raises:
            CacheIOError: If the cache directory cannot be removed.
        """
        with self._lock:
            self._entries.clear()
        if self.directory is not None and self.directory.exists():
            try:
                shutil.rmtree(self.directory)
            except OSError as exc:
                raise CacheIOError(f"Cannot remove cache directory '{self.directory}': {exc}") from exc

    # ################
    # Implementation
    # ################

    def _remember(self, key: str, entry: CacheEntry) -> None:
        """Insert into the in-memory map; the caller holds the lock."""
        self._entries[key] = entry
        self._entries.move_to_end(key)
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def _path_for(self, key: str) -> Path:
        if self.directory is None:
            raise CacheIOError("Cache has no persistence directory")
        if not _KEY_RE.match(key):
            raise CacheIOError(f"Cache key '{key}' is not a hex digest")
        return self.directory / key[:2] / (key + ARTIFACT_SUFFIX)

    def _read(self, key: str) -> CacheEntry | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return read_artifact(path)
        except (OSError, ValueError) as exc:
            raise CacheIOError(f"Cannot read cache entry '{path}': {exc}") from exc

    def _write(self, key: str, entry: CacheEntry) -> None:
        path = self._path_for(key)
        try:
            write_artifact(entry, path)
        except OSError as exc:
            raise CacheIOError(f"Cannot write cache entry '{path}': {exc}") from exc


_KEY_RE = re.compile(r"^[0-9a-f]{16,128}$")
