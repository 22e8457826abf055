# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the libsass compiler adapter."""

from __future__ import annotations

import base64

import pytest

from stylebatch.compiler.backend import LibsassCompiler, _compiler_error, _split_embedded_map
from stylebatch.compiler.errors import CompilerError
from stylebatch.model.entities import CompileOptions, SourceFile
from stylebatch.model.types import OutputMode

# ###############
# Helpers
# ###############


def _no_imports(reference: str, importer_path: str) -> tuple[str, str] | None:
    return None


def _compile(text: str, *, path: str = "main.scss", **options: object) -> str:
    source = SourceFile.from_text(path, text)
    return LibsassCompiler().compile(source, CompileOptions(**options), _no_imports).css


# ###############
# Compilation
# ###############


class TestLibsassCompiler:
    def test_expanded_output(self) -> None:
        assert _compile("a { b: c; }") == "a {\n  b: c;\n}\n"

    def test_compact_output(self) -> None:
        assert _compile("a { b: c; }", output_mode=OutputMode.COMPACT) == "a{b:c}\n"

    def test_variables_are_evaluated(self) -> None:
        css = _compile("$w: 10px;\n.box { width: $w * 2; }", output_mode=OutputMode.COMPACT)
        assert css == ".box{width:20px}\n"

    def test_indented_syntax(self) -> None:
        css = _compile("a\n  b: c\n", path="main.sass", output_mode=OutputMode.COMPACT)
        assert css == "a{b:c}\n"

    def test_imports_are_served_by_loader(self) -> None:
        requests: list[tuple[str, str]] = []

        def loader(reference: str, importer_path: str) -> tuple[str, str] | None:
            requests.append((reference, importer_path))
            if reference == "colors":
                return "dir/_colors.scss", "$main: red;"
            return None

        source = SourceFile.from_text("dir/root.scss", '@import "colors";\na { color: $main; }')
        output = LibsassCompiler().compile(source, CompileOptions(output_mode=OutputMode.COMPACT), loader)
        assert output.css == "a{color:red}\n"
        assert requests == [("colors", "dir/root.scss")]

    def test_syntax_error_raises_compiler_error(self) -> None:
        with pytest.raises(CompilerError) as exc_info:
            _compile("a { b: c;", path="dir/root.scss")
        err = exc_info.value
        assert err.source_file == "dir/root.scss"
        assert err.line is not None
        assert err.message


# ###############
# Helpers
# ###############


class TestErrorParsing:
    def test_position_of_stdin_maps_to_entry(self) -> None:
        err = _compiler_error('Error: Invalid CSS after "a {"\n        on line 1:4 of stdin\n>> a {', "x.scss")
        assert (err.source_file, err.line, err.column) == ("x.scss", 1, 4)
        assert err.message.startswith("Error: Invalid CSS")

    def test_position_in_imported_file(self) -> None:
        err = _compiler_error("Error: Undefined variable\n        on line 3:10 of dir/_in-dir.scss", "dir/root.scss")
        assert (err.source_file, err.line, err.column) == ("dir/_in-dir.scss", 3, 10)

    def test_message_without_position(self) -> None:
        err = _compiler_error("Error: something\n", "x.scss")
        assert (err.source_file, err.line, err.column) == ("x.scss", None, None)
        assert err.message == "Error: something"


class TestEmbeddedMap:
    def test_map_is_split_off(self) -> None:
        payload = base64.b64encode(b'{"version":3}').decode("ascii")
        css = f"a{{b:c}}\n\n/*# sourceMappingURL=data:application/json;base64,{payload} */"
        assert _split_embedded_map(css) == ("a{b:c}\n", '{"version":3}')

    def test_css_without_map(self) -> None:
        assert _split_embedded_map("a{b:c}\n") == ("a{b:c}\n", None)
