# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the StyleBatch data model."""

import hashlib

import pytest
from pydantic import ValidationError

from stylebatch.model import (
    CacheEntry,
    CompileOptions,
    Diagnostic,
    DiagnosticKind,
    OutputMode,
    SourceFile,
    is_partial_path,
    normalize_path,
    split_extension,
)

# ###############
# Path helpers
# ###############


class TestNormalizePath:
    def test_plain_relative_path_is_unchanged(self) -> None:
        assert normalize_path("dir/root.scss") == "dir/root.scss"

    def test_leading_slash_is_dropped(self) -> None:
        assert normalize_path("/dir/root.scss") == "dir/root.scss"

    def test_backslashes_become_slashes(self) -> None:
        assert normalize_path("dir\\sub\\a.scss") == "dir/sub/a.scss"

    def test_dot_segments_are_collapsed(self) -> None:
        assert normalize_path("dir/./sub/../a.scss") == "dir/a.scss"

    @pytest.mark.parametrize("path", ["", "   ", ".", "..", "../a.scss", "dir/../../a.scss"])
    def test_rejects_paths_outside_root(self, path: str) -> None:
        with pytest.raises(ValueError):
            normalize_path(path)


class TestExtensions:
    def test_split_scss(self) -> None:
        assert split_extension("dir/a.scss") == ("dir/a", ".scss")

    def test_split_sass(self) -> None:
        assert split_extension("a.sass") == ("a", ".sass")

    def test_css_is_not_a_stylesheet_extension(self) -> None:
        assert split_extension("a.css") == ("a.css", "")

    def test_partial_detection_uses_basename(self) -> None:
        assert is_partial_path("dir/_in-dir.scss")
        assert not is_partial_path("_dir/root.scss")


# ###############
# SourceFile
# ###############


class TestSourceFile:
    def test_hash_is_computed_from_content(self) -> None:
        f = SourceFile(path="a.scss", content=b"a { b: c; }")
        assert f.content_hash == hashlib.sha256(b"a { b: c; }").hexdigest()

    def test_explicit_hash_is_kept(self) -> None:
        f = SourceFile(path="a.scss", content=b"x", content_hash="abc")
        assert f.content_hash == "abc"

    def test_from_text_encodes_utf8(self) -> None:
        f = SourceFile.from_text("a.scss", "content: 'é';")
        assert f.content == "content: 'é';".encode("utf-8")
        assert f.text() == "content: 'é';"

    def test_path_is_normalized(self) -> None:
        assert SourceFile.from_text("/dir//root.scss", "").path == "dir/root.scss"

    def test_invalid_path_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SourceFile.from_text("../outside.scss", "")

    def test_is_frozen(self) -> None:
        f = SourceFile.from_text("a.scss", "")
        with pytest.raises(ValidationError):
            f.path = "b.scss"  # type: ignore[misc]

    def test_partial_and_indented_flags(self) -> None:
        assert SourceFile.from_text("dir/_top.scss", "").is_partial
        assert SourceFile.from_text("top.sass", "").is_indented
        assert not SourceFile.from_text("top.scss", "").is_indented

    def test_directory(self) -> None:
        assert SourceFile.from_text("dir/subdir/a.scss", "").directory == "dir/subdir"
        assert SourceFile.from_text("a.scss", "").directory == ""

    def test_neutral_file_is_visible_to_every_target(self) -> None:
        f = SourceFile.from_text("a.scss", "")
        assert f.is_visible_to("client")
        assert f.is_visible_to("server")

    def test_targeted_file_is_visible_to_its_target_only(self) -> None:
        f = SourceFile.from_text("a.scss", "", target="client")
        assert f.is_visible_to("client")
        assert not f.is_visible_to("server")
        assert f.is_visible_to(None)

    def test_partial_is_never_an_entry(self) -> None:
        assert not SourceFile.from_text("_a.scss", "").is_entry_for("client")

    def test_import_only_file_is_not_an_entry(self) -> None:
        f = SourceFile.from_text("top2.scss", "", target="client", is_entry_candidate=False)
        assert not f.is_entry_for("client")

    def test_entry_for_matching_target(self) -> None:
        f = SourceFile.from_text("a.scss", "", target="client")
        assert f.is_entry_for("client")
        assert not f.is_entry_for("server")


# ###############
# Options, diagnostics and cache entries
# ###############


class TestCompileOptions:
    def test_defaults(self) -> None:
        options = CompileOptions()
        assert options.include_paths == ()
        assert options.output_mode is OutputMode.EXPANDED
        assert options.source_maps is False

    def test_include_paths_are_normalized_tuple(self) -> None:
        options = CompileOptions(include_paths=["./modules/", "/lib"])
        assert options.include_paths == ("modules", "lib")

    def test_output_mode_from_string(self) -> None:
        assert CompileOptions(output_mode="compact").output_mode is OutputMode.COMPACT

    def test_equal_options_compare_equal(self) -> None:
        assert CompileOptions(include_paths=["a"]) == CompileOptions(include_paths=("a",))


class TestDiagnostic:
    def test_format_with_full_position(self) -> None:
        d = Diagnostic(kind=DiagnosticKind.COMPILER, message="bad", source_file="a.scss", line=3, column=7)
        assert d.format() == "a.scss:3:7: bad"

    def test_format_without_position(self) -> None:
        d = Diagnostic(kind=DiagnosticKind.CYCLE, message="cycle", source_file="a.scss")
        assert d.format() == "a.scss: cycle"

    def test_format_message_only(self) -> None:
        assert Diagnostic(kind=DiagnosticKind.CANCELLED, message="stopped").format() == "stopped"


class TestCacheEntry:
    def test_success(self) -> None:
        assert CacheEntry(css="a{}", dependencies=("b.scss",)).succeeded

    def test_failure(self) -> None:
        entry = CacheEntry(diagnostic=Diagnostic(kind=DiagnosticKind.COMPILER, message="x"))
        assert not entry.succeeded

    def test_equality_is_by_value(self) -> None:
        assert CacheEntry(css="a", dependencies=("x",)) == CacheEntry(css="a", dependencies=("x",))

    def test_entry_needs_an_outcome(self) -> None:
        with pytest.raises(ValidationError):
            CacheEntry(dependencies=("x",))

    def test_entry_cannot_both_succeed_and_fail(self) -> None:
        with pytest.raises(ValidationError):
            CacheEntry(css="a", diagnostic=Diagnostic(kind=DiagnosticKind.COMPILER, message="x"))
