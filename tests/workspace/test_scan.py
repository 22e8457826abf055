# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for stylesheet discovery in a project directory."""

from pathlib import Path

from stylebatch.workspace import WorkspaceConfig, collect_source_files

# ###############
# Helpers
# ###############


def _touch(root: Path, rel: str, text: str = "") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


# ###############
# Discovery
# ###############


def test_collects_stylesheets_sorted_by_path(tmp_path: Path) -> None:
    """Both syntaxes are found; other files are ignored."""
    _touch(tmp_path, "b.scss")
    _touch(tmp_path, "a/_p.sass")
    _touch(tmp_path, "a/readme.md")
    _touch(tmp_path, "plain.css")

    files = collect_source_files(tmp_path, WorkspaceConfig())

    assert [f.path for f in files] == ["a/_p.sass", "b.scss"]


def test_content_is_read_verbatim(tmp_path: Path) -> None:
    _touch(tmp_path, "main.scss", ".a { color: red; }")
    (source,) = collect_source_files(tmp_path, WorkspaceConfig())
    assert source.text() == ".a { color: red; }"
    assert source.content_hash


def test_hidden_vendor_and_build_directories_are_skipped(tmp_path: Path) -> None:
    """Dot directories, node_modules and the cache/output directories are not scanned."""
    _touch(tmp_path, "main.scss")
    _touch(tmp_path, ".git/x.scss")
    _touch(tmp_path, "node_modules/pkg/y.scss")
    _touch(tmp_path, "dist/main.scss")
    _touch(tmp_path, "cache/entry.scss")

    config = WorkspaceConfig(cache_directory="cache", output_directory="dist")
    files = collect_source_files(tmp_path, config)

    assert [f.path for f in files] == ["main.scss"]


def test_target_directories_tag_files(tmp_path: Path) -> None:
    """Files below client/ or server/ belong to that target; others are neutral."""
    _touch(tmp_path, "shared.scss")
    _touch(tmp_path, "client/app.scss")
    _touch(tmp_path, "imports/server/_theme.scss")

    targets = {f.path: f.target for f in collect_source_files(tmp_path, WorkspaceConfig())}

    assert targets == {
        "client/app.scss": "client",
        "imports/server/_theme.scss": "server",
        "shared.scss": None,
    }


def test_import_only_patterns_clear_entry_candidacy(tmp_path: Path) -> None:
    _touch(tmp_path, "main.scss")
    _touch(tmp_path, "lib/mixins.scss")

    config = WorkspaceConfig(import_only=["lib/*.scss"])
    candidacy = {f.path: f.is_entry_candidate for f in collect_source_files(tmp_path, config)}

    assert candidacy == {"lib/mixins.scss": False, "main.scss": True}
