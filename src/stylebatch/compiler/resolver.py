# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import resolution against the file set of one batch.

Resolution is deterministic and order-sensitive.  For each candidate base
directory, the importer's own directory first and then every include path in
the order given, the resolver tries:

1. the partial form, ``_<name>.scss`` then ``_<name>.sass``;
2. the plain form, ``<name>.scss`` then ``<name>.sass``;
3. directory forms for a reference naming a directory:
   ``<ref>/_index``, ``<ref>/index``, ``<ref>/_<name>`` and ``<ref>/<name>``,
   each with both extensions.

The first candidate present in the file set wins.  A partial and a plain file
with the same name may legally coexist in one directory, so this order must
not change.

Two reference forms bypass the directory search:

* ``{}/path/to/file`` is resolved against the project root only.
* External forms (``sass:`` built-in modules, URLs, ``url(...)``, ``.css``
  files, ``~`` bare modules and interpolated references) are passed through
  to the underlying compiler unresolved.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator, Mapping, Sequence

from stylebatch.compiler.errors import ResolutionError
from stylebatch.model.entities import SourceFile
from stylebatch.model.types import PARTIAL_PREFIX, STYLESHEET_EXTENSIONS, split_extension

# ###############
# Public Interface
# ###############

ROOT_PREFIX = "{}/"
"""Reference prefix anchoring resolution at the project root."""


def is_external_reference(reference: str) -> bool:
    """Return True if *reference* is left to the underlying compiler."""
    return (
        reference.startswith(_EXTERNAL_PREFIXES)
        or reference.endswith(".css")
        or "#{" in reference
    )


class ImportResolver:
    """Resolves import references to files of one batch's file set.

    Args:
        files: Mapping from normalized logical path to source file.
    """

    def __init__(self, files: Mapping[str, SourceFile]) -> None:
        self._files = files

    def resolve(
        self,
        importer_path: str,
        reference: str,
        include_paths: Sequence[str] = (),
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> SourceFile | None:
        """Resolve *reference* as written in the file at *importer_path*.

        Args:
            importer_path: Logical path of the importing file.
            reference: The raw import reference.
            include_paths: Directories searched after the importer's directory.
            line: Position of the reference, carried into a ResolutionError.
            column: Position of the reference, carried into a ResolutionError.

        Returns:
            The matching source file, or None for external references that the
            underlying compiler resolves itself.

        Raises:
            ResolutionError: If no candidate matches a file in the file set.
        """
        if is_external_reference(reference):
            return None
        for candidate in self.candidates(importer_path, reference, include_paths):
            found = self._files.get(candidate)
            if found is not None:
                return found
        raise ResolutionError(reference, importer_path, line=line, column=column)

    def candidates(self, importer_path: str, reference: str, include_paths: Sequence[str] = ()) -> list[str]:
        """Return every candidate path for *reference*, in preference order."""
        stem, _ = split_extension(reference.strip())
        if stem.startswith(ROOT_PREFIX):
            bases: list[str] = [""]
            stem = stem[len(ROOT_PREFIX) :]
        elif stem.startswith("/"):
            bases = [""]
            stem = stem.lstrip("/")
        else:
            bases = [posixpath.dirname(importer_path), *include_paths]

        seen: set[str] = set()
        result: list[str] = []
        for base in bases:
            for candidate in _candidates_in(base, stem):
                if candidate not in seen:
                    seen.add(candidate)
                    result.append(candidate)
        return result


# ################
# Implementation
# ################

_EXTERNAL_PREFIXES = ("sass:", "http://", "https://", "//", "url(", "~")


def _candidates_in(base: str, stem: str) -> Iterator[str]:
    """Yield the candidate paths for *stem* below one base directory."""
    joined = posixpath.normpath(posixpath.join(base, stem)) if base else posixpath.normpath(stem)
    if joined in (".", "") or joined == ".." or joined.startswith("../"):
        return
    directory, name = posixpath.split(joined)

    for ext in STYLESHEET_EXTENSIONS:
        yield posixpath.join(directory, PARTIAL_PREFIX + name + ext)
    for ext in STYLESHEET_EXTENSIONS:
        yield posixpath.join(directory, name + ext)

    for index_name in (PARTIAL_PREFIX + "index", "index", PARTIAL_PREFIX + name, name):
        for ext in STYLESHEET_EXTENSIONS:
            yield posixpath.join(joined, index_name + ext)
