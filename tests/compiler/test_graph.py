# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the import dependency graph."""

import pytest

from stylebatch.compiler.errors import CycleError, ResolutionError
from stylebatch.compiler.graph import DependencyGraph
from stylebatch.model.entities import SourceFile

# ###############
# Helpers
# ###############


def _graph(files: dict[str, str], include_paths: tuple[str, ...] = ()) -> DependencyGraph:
    """Build a graph over files given as ``{path: text}``."""
    return DependencyGraph.build(
        [SourceFile.from_text(path, text) for path, text in files.items()],
        include_paths=include_paths,
    )


# ###############
# Edges
# ###############


class TestEdges:
    def test_file_without_imports_has_no_edges(self) -> None:
        graph = _graph({"empty.scss": ""})
        assert graph.direct_dependencies("empty.scss") == []

    def test_edges_follow_import_order(self) -> None:
        graph = _graph({"main.scss": '@import "b", "a";', "_a.scss": "", "_b.scss": ""})
        assert graph.direct_dependencies("main.scss") == ["_b.scss", "_a.scss"]

    def test_duplicate_imports_collapse(self) -> None:
        graph = _graph({"main.scss": '@import "a";\n@use "a";', "_a.scss": ""})
        assert graph.direct_dependencies("main.scss") == ["_a.scss"]

    def test_external_references_add_no_edge(self) -> None:
        graph = _graph({"main.scss": '@use "sass:math";\n@import "x.css";'})
        assert graph.direct_dependencies("main.scss") == []
        assert graph.problems == {}

    def test_unresolved_import_is_recorded_not_raised(self) -> None:
        graph = _graph({"main.scss": '@import "ok", "missing";', "_ok.scss": ""})
        assert graph.direct_dependencies("main.scss") == ["_ok.scss"]
        assert [e.reference for e in graph.problems["main.scss"]] == ["missing"]

    def test_scan_failure_is_recorded(self) -> None:
        graph = _graph({"broken.scss": "/* open", "fine.scss": ""})
        assert "broken.scss" in graph.problems
        assert graph.transitive_closure("fine.scss") == ()

    def test_include_paths_are_used(self) -> None:
        graph = _graph(
            {"include-paths.scss": '@import "module";', "modules/module/_module.scss": ""},
            include_paths=("modules",),
        )
        assert graph.direct_dependencies("include-paths.scss") == ["modules/module/_module.scss"]


# ###############
# Transitive closure
# ###############


class TestTransitiveClosure:
    def test_closure_is_depth_first_preorder(self) -> None:
        graph = _graph(
            {
                "root.scss": '@import "a", "d";',
                "_a.scss": '@import "b";',
                "_b.scss": '@import "c";',
                "_c.scss": "",
                "_d.scss": '@import "c";',
            }
        )
        assert graph.transitive_closure("root.scss") == ("_a.scss", "_b.scss", "_c.scss", "_d.scss")

    def test_closure_excludes_entry(self) -> None:
        graph = _graph({"root.scss": '@import "a";', "_a.scss": ""})
        assert "root.scss" not in graph.transitive_closure("root.scss")

    def test_closure_is_memoized(self) -> None:
        graph = _graph({"root.scss": '@import "a";', "_a.scss": ""})
        assert graph.transitive_closure("root.scss") is graph.transitive_closure("root.scss")

    def test_unresolved_import_in_dependency_fails_entry(self) -> None:
        graph = _graph({"root.scss": '@import "a";', "_a.scss": '@import "missing";'})
        with pytest.raises(ResolutionError) as exc_info:
            graph.transitive_closure("root.scss")
        assert exc_info.value.importer == "_a.scss"

    def test_diamond_is_not_a_cycle(self) -> None:
        graph = _graph(
            {
                "root.scss": '@import "left", "right";',
                "_left.scss": '@import "base";',
                "_right.scss": '@import "base";',
                "_base.scss": "",
            }
        )
        assert graph.transitive_closure("root.scss") == ("_left.scss", "_base.scss", "_right.scss")


# ###############
# Cycles
# ###############


class TestCycles:
    def test_two_file_cycle(self) -> None:
        graph = _graph({"a.scss": '@import "b";', "b.scss": '@import "a";'})
        with pytest.raises(CycleError) as exc_info:
            graph.transitive_closure("a.scss")
        assert exc_info.value.cycle == ["a.scss", "b.scss", "a.scss"]

    def test_self_import(self) -> None:
        graph = _graph({"a.scss": '@import "a";'})
        with pytest.raises(CycleError) as exc_info:
            graph.transitive_closure("a.scss")
        assert exc_info.value.cycle == ["a.scss", "a.scss"]

    def test_cycle_below_entry_names_only_cycle_members(self) -> None:
        graph = _graph({"root.scss": '@import "a";', "_a.scss": '@import "b";', "_b.scss": '@import "a";'})
        with pytest.raises(CycleError) as exc_info:
            graph.transitive_closure("root.scss")
        assert exc_info.value.cycle == ["_a.scss", "_b.scss", "_a.scss"]

    def test_cycle_does_not_affect_unrelated_entry(self) -> None:
        graph = _graph({"a.scss": '@import "b";', "b.scss": '@import "a";', "empty.scss": ""})
        with pytest.raises(CycleError):
            graph.transitive_closure("a.scss")
        assert graph.transitive_closure("empty.scss") == ()


# ###############
# Reverse queries
# ###############


class TestDependents:
    def test_dependents_are_transitive(self) -> None:
        graph = _graph(
            {
                "dir/root.scss": '@import "in-dir";',
                "dir/_in-dir.scss": '@import "in-dir2";',
                "dir/_in-dir2.scss": "",
                "top2.scss": "",
            }
        )
        assert graph.dependents("dir/_in-dir2.scss") == ["dir/_in-dir.scss", "dir/root.scss"]
        assert graph.dependents("top2.scss") == []

    def test_dependents_terminate_on_cycles(self) -> None:
        graph = _graph({"a.scss": '@import "b";', "b.scss": '@import "a";'})
        assert graph.dependents("a.scss") == ["b.scss"]
