# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical import scanner for .scss and .sass files.

Finds the references named by ``@import``, ``@use`` and ``@forward``
directives without parsing the stylesheet.  Comments, string literals and
``url(...)`` tokens are skipped so that directive-like text inside them is
never mistaken for an import.
"""

from dataclasses import dataclass

# ###############
# Public Interface
# ###############

IMPORT_DIRECTIVES: frozenset[str] = frozenset({"import", "use", "forward"})


@dataclass(frozen=True)
class ImportReference:
    """An import reference found in a stylesheet.

    Attributes:
        directive: The directive that introduced the reference (``import``,
            ``use`` or ``forward``).
        target: The raw reference text with quotes removed.
        line: 1-based line number of the reference token.
        column: 1-based column number of the reference token.
    """

    directive: str
    target: str
    line: int
    column: int


class ScanError(Exception):
    """Raised when the scanner hits an unterminated string or block comment.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


def scan_imports(source: str, *, indented: bool = False) -> list[ImportReference]:
    """Return every import reference in *source*, in source order.

    Args:
        source: The full text of a stylesheet.
        indented: True for the indented ``.sass`` syntax, where a directive
            ends at the end of its line and references may be unquoted.

    Raises:
        ScanError: On unterminated string literals or block comments.
    """
    return _Scanner(source, indented=indented).scan()


# ################
# Implementation
# ################

_QUOTES = "\"'"
_IDENT_CHARS = "-_"


class _Scanner:
    """Internal scanner state machine."""

    def __init__(self, source: str, *, indented: bool) -> None:
        self._source = source
        self._indented = indented
        self._pos = 0
        self._line = 1
        self._column = 1
        self._references: list[ImportReference] = []

    def scan(self) -> list[ImportReference]:
        """Run the scanner over the whole source."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments(newlines=True)
            if self._pos >= len(self._source):
                break
            ch = self._current()
            if ch == "@":
                self._scan_at_rule()
            elif ch in _QUOTES:
                self._read_string()
            elif self._at_url():
                self._read_url()
            else:
                self._advance()
        return self._references

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _at_url(self) -> bool:
        return self._source.startswith("url(", self._pos)

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self, *, newlines: bool) -> None:
        """Skip whitespace and comments; stop before a newline unless *newlines*."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r" or (ch == "\n" and newlines):
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        indent = self._comment_indent()
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()
        if self._indented and indent is not None:
            self._skip_nested_lines(indent)

    def _skip_block_comment(self) -> None:
        """Skip a ``/* */`` comment.

        In the indented syntax the closing ``*/`` is optional: a comment that
        starts a line also spans the lines indented deeper below it.
        """
        start_line = self._line
        start_col = self._column
        indent = self._comment_indent()
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()
                self._advance()
                return
            if self._indented and self._current() == "\n":
                if indent is not None:
                    self._skip_nested_lines(indent)
                return
            self._advance()
        if not self._indented:
            raise ScanError("Unterminated block comment", start_line, start_col)

    def _comment_indent(self) -> int | None:
        """Return the indentation of a comment that starts its line, else None."""
        line_start = self._source.rfind("\n", 0, self._pos) + 1
        prefix = self._source[line_start : self._pos]
        if prefix.strip(" \t"):
            return None
        return len(prefix)

    def _skip_nested_lines(self, indent: int) -> None:
        """Skip the following lines that are blank or indented deeper than *indent*.

        Stops on the newline before the first line that is not.
        """
        while self._current() == "\n":
            next_start = self._pos + 1
            end = self._source.find("\n", next_start)
            if end == -1:
                end = len(self._source)
            line = self._source[next_start:end]
            depth = len(line) - len(line.lstrip(" \t"))
            if line.strip() and depth <= indent:
                return
            while self._pos < end:
                self._advance()

    # ------------------------------------------------------------------
    # Directive scanning
    # ------------------------------------------------------------------

    def _scan_at_rule(self) -> None:
        self._advance()  # @
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() in _IDENT_CHARS):
            self._advance()
        name = self._source[start : self._pos]
        if name in IMPORT_DIRECTIVES:
            self._scan_directive(name)

    def _scan_directive(self, directive: str) -> None:
        """Collect the references of one directive.

        Only ``@import`` accepts a comma-separated list; ``@use`` and
        ``@forward`` take a single reference followed by modifiers the main
        loop skips over.
        """
        while True:
            self._skip_whitespace_and_comments(newlines=not self._indented)
            line = self._line
            col = self._column
            ch = self._current()
            if ch and ch in _QUOTES:
                target = self._read_string()
            elif self._at_url():
                target = self._read_url()
            elif self._indented and ch and ch not in ",;{\n":
                target = self._read_bare()
            else:
                return
            self._references.append(ImportReference(directive, target, line, col))
            if directive != "import":
                return
            self._skip_whitespace_and_comments(newlines=not self._indented)
            if self._current() != ",":
                return
            self._advance()

    # ------------------------------------------------------------------
    # Token readers
    # ------------------------------------------------------------------

    def _read_string(self) -> str:
        """Read a quoted string literal and return its unescaped content."""
        line = self._line
        col = self._column
        quote = self._advance()
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()
                return "".join(chars)
            if ch == "\n":
                raise ScanError("Unterminated string literal", line, col)
            if ch == "\\":
                self._advance()
                if self._pos >= len(self._source):
                    break
                chars.append(self._advance())
            else:
                chars.append(self._advance())
        raise ScanError("Unterminated string literal", line, col)

    def _read_url(self) -> str:
        """Read a ``url(...)`` token verbatim, including nested quotes."""
        start = self._pos
        line = self._line
        col = self._column
        while self._pos < len(self._source):
            ch = self._current()
            if ch in _QUOTES:
                self._read_string()
                continue
            if ch == "\n":
                break
            self._advance()
            if ch == ")":
                return self._source[start : self._pos]
        raise ScanError("Unterminated url()", line, col)

    def _read_bare(self) -> str:
        """Read an unquoted reference of the indented syntax."""
        start = self._pos
        while self._pos < len(self._source) and self._current() not in " \t\r\n,;{":
            self._advance()
        return self._source[start : self._pos]
