# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler core: import resolution, dependency graph, cache and batch driver."""

from stylebatch.compiler.artifact import ARTIFACT_SUFFIX, deserialize, read_artifact, serialize, write_artifact
from stylebatch.compiler.backend import CompileOutput, LibsassCompiler, Loader, StylesheetCompiler
from stylebatch.compiler.build import BatchResult, BuildContext, UnitResult, run_batch
from stylebatch.compiler.cache import CompileCache, compute_cache_key
from stylebatch.compiler.emitter import (
    CompiledArtifact,
    FailedArtifact,
    HostArtifact,
    output_path_for,
    package,
    package_batch,
    write_artifacts,
)
from stylebatch.compiler.errors import (
    CacheIOError,
    CompilerError,
    CycleError,
    FileSetError,
    ResolutionError,
    StyleBatchError,
    UnitError,
)
from stylebatch.compiler.graph import DependencyGraph
from stylebatch.compiler.resolver import ImportResolver, is_external_reference

__all__ = [
    "ARTIFACT_SUFFIX",
    "BatchResult",
    "BuildContext",
    "CacheIOError",
    "CompileCache",
    "CompileOutput",
    "CompiledArtifact",
    "CompilerError",
    "CycleError",
    "DependencyGraph",
    "FailedArtifact",
    "FileSetError",
    "HostArtifact",
    "ImportResolver",
    "LibsassCompiler",
    "Loader",
    "ResolutionError",
    "StyleBatchError",
    "StylesheetCompiler",
    "UnitError",
    "UnitResult",
    "compute_cache_key",
    "deserialize",
    "is_external_reference",
    "output_path_for",
    "package",
    "package_batch",
    "read_artifact",
    "run_batch",
    "serialize",
    "write_artifact",
]
