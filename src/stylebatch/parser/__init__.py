# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical import scanning for stylesheets."""

from stylebatch.parser.scanner import IMPORT_DIRECTIVES, ImportReference, ScanError, scan_imports

__all__ = [
    "IMPORT_DIRECTIVES",
    "ImportReference",
    "ScanError",
    "scan_imports",
]
