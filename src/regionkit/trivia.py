"""Trivia scanning: the parser capability consumed by the region finder.

A document is parsed into an ordered sequence of nodes, each carrying the
leading trivia that precede it. Trivia are classified once, here, into a
``TriviaKind`` so downstream matching never re-inspects marker syntax.

Two parsers ship:
    DirectiveLineParser  : ``#region`` / ``#endregion`` preprocessor lines
                           (C# and any language without a dedicated parser).
    PythonCommentParser  : full-line ``# region`` / ``# endregion`` comments,
                           found with ``tokenize`` so markers inside strings
                           or after code on the same line are ignored.
"""
from __future__ import annotations

import io
import re
import tokenize
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Protocol

from regionkit.errors import ConfigError, DocumentParseError
from regionkit.workspace_types import SourceSpan


class TriviaKind(Enum):
    REGION_START = "region_start"
    REGION_END = "region_end"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Trivia:
    """One trivia record: a marker line, comment, or blank line."""

    kind: TriviaKind
    span: SourceSpan
    raw_text: str
    name: str = ""      # Inline region name (REGION_START only)


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """A code line (or logical line) with the trivia that precede it."""

    span: SourceSpan
    leading_trivia: tuple[Trivia, ...]


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    text: str
    nodes: tuple[SyntaxNode, ...]

    def iter_trivia(self) -> list[Trivia]:
        """All leading trivia of all nodes, in node order."""
        return [t for node in self.nodes for t in node.leading_trivia]


class TriviaParser(Protocol):
    def parse(self, text: str) -> ParsedDocument: ...


def compute_line_starts(text: str) -> list[int]:
    """Char offsets of every line start (position 0 plus each char after ``\\n``)."""
    starts = [0]
    for i, ch in enumerate(text):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def _line_end(text: str, line_start: int) -> int:
    """Offset of the line terminator (``\\r\\n`` or ``\\n``) or end of text."""
    end = text.find("\n", line_start)
    if end < 0:
        return len(text)
    if end > line_start and text[end - 1] == "\r":
        return end - 1
    return end


# ---------------------------------------------------------------------------
# Directive lines (#region / #endregion)
# ---------------------------------------------------------------------------

_DIRECTIVE_START_RE = re.compile(r"#region\b(.*)$")
_DIRECTIVE_END_RE = re.compile(r"#endregion\b")


class _LexMode(Enum):
    CODE = "code"
    BLOCK_COMMENT = "block_comment"
    VERBATIM_STRING = "verbatim_string"
    RAW_STRING = "raw_string"


@dataclass(frozen=True, slots=True)
class _LexState:
    """Multi-line construct still open at the end of a line."""

    mode: _LexMode = _LexMode.CODE
    quotes: int = 0     # Delimiter width of an open raw string


def _skip_quoted(line: str, i: int, quote: str) -> int:
    """Index just past the literal opened at ``line[i]``; backslash escapes."""
    i += 1
    while i < len(line) and line[i] != quote:
        i += 2 if line[i] == "\\" else 1
    return i + 1


def _advance(line: str, state: _LexState) -> _LexState:
    """Carry the lexical state across one line of C-family source.

    Block comments and multi-line verbatim or raw string literals can hide a
    ``#region`` line from the preprocessor, so those stay open across lines.
    """
    mode, quotes = state.mode, state.quotes
    i, n = 0, len(line)
    while i < n:
        if mode is _LexMode.BLOCK_COMMENT:
            close = line.find("*/", i)
            if close < 0:
                return _LexState(mode)
            i, mode = close + 2, _LexMode.CODE
        elif mode is _LexMode.VERBATIM_STRING:
            close = line.find('"', i)
            if close < 0:
                return _LexState(mode)
            if line.startswith('""', close):
                i = close + 2
            else:
                i, mode = close + 1, _LexMode.CODE
        elif mode is _LexMode.RAW_STRING:
            close = line.find('"' * quotes, i)
            if close < 0:
                return _LexState(mode, quotes)
            i, mode, quotes = close + quotes, _LexMode.CODE, 0
        elif line.startswith("//", i):
            break
        elif line.startswith("/*", i):
            i, mode = i + 2, _LexMode.BLOCK_COMMENT
        elif line[i] == '"':
            run = len(line) - i - len(line[i:].lstrip('"'))
            if run >= 3:
                i, mode, quotes = i + run, _LexMode.RAW_STRING, run
            elif line[:i].endswith(("@", "@$")):
                i, mode = i + 1, _LexMode.VERBATIM_STRING
            elif run == 2:
                i += 2
            else:
                i = _skip_quoted(line, i, '"')
        elif line[i] == "'":
            i = _skip_quoted(line, i, "'")
        else:
            i += 1
    return _LexState(mode, quotes)


class DirectiveLineParser:
    """Line-oriented scanner for ``#region`` preprocessor directives.

    Directives must be the first non-blank text on their line. The trivia
    span runs from ``#`` to the end of the line, excluding the terminator.
    Blank lines, ``//`` comment lines and lines of ``/* */`` comments are
    OTHER trivia; lines inside a multi-line verbatim or raw string belong to
    the code line that opened it; every other line becomes a node.
    """

    def parse(self, text: str) -> ParsedDocument:
        nodes: list[SyntaxNode] = []
        pending: list[Trivia] = []
        state = _LexState()
        for line_start in compute_line_starts(text):
            if line_start == len(text) and line_start > 0:
                break
            line_end = _line_end(text, line_start)
            line = text[line_start:line_end]
            stripped = line.lstrip(" \t")
            body_start = line_start + (len(line) - len(stripped))
            span = SourceSpan(body_start, line_end)

            if state.mode is _LexMode.BLOCK_COMMENT:
                pending.append(Trivia(TriviaKind.OTHER, span, stripped))
                state = _advance(line, state)
                continue
            if state.mode is not _LexMode.CODE:
                state = _advance(line, state)
                continue

            start_match = _DIRECTIVE_START_RE.match(stripped)
            if start_match:
                pending.append(Trivia(
                    TriviaKind.REGION_START, span, stripped,
                    name=start_match.group(1).strip(),
                ))
            elif _DIRECTIVE_END_RE.match(stripped):
                pending.append(Trivia(TriviaKind.REGION_END, span, stripped))
            elif not stripped or stripped.startswith(("//", "/*")):
                pending.append(Trivia(TriviaKind.OTHER, span, stripped))
                state = _advance(line, state)
            else:
                nodes.append(SyntaxNode(span, tuple(pending)))
                pending = []
                state = _advance(line, state)

        eof = SourceSpan(len(text), len(text))
        nodes.append(SyntaxNode(eof, tuple(pending)))
        return ParsedDocument(text=text, nodes=tuple(nodes))


# ---------------------------------------------------------------------------
# Python comments (# region / # endregion)
# ---------------------------------------------------------------------------

_COMMENT_START_RE = re.compile(r"#\s*region\b(.*)$")
_COMMENT_END_RE = re.compile(r"#\s*endregion\b")

_LAYOUT_TOKENS = frozenset({
    tokenize.NL, tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT,
    tokenize.ENCODING,
})


class PythonCommentParser:
    """``tokenize``-based scanner for region comments in Python source.

    Only comments that stand alone on their line are trivia; a trailing
    comment after code belongs to that code. Each logical line's first
    significant token opens a node.
    """

    def parse(self, text: str) -> ParsedDocument:
        line_starts = compute_line_starts(text)

        def offset(row: int, col: int) -> int:
            return line_starts[row - 1] + col

        nodes: list[SyntaxNode] = []
        pending: list[Trivia] = []
        at_line_start = True
        try:
            for tok in tokenize.generate_tokens(io.StringIO(text).readline):
                if tok.type == tokenize.ENDMARKER:
                    break
                if tok.type in _LAYOUT_TOKENS:
                    if tok.type == tokenize.NEWLINE:
                        at_line_start = True
                    continue
                start = offset(*tok.start)
                end = offset(*tok.end)
                if tok.type == tokenize.COMMENT:
                    if tok.line[:tok.start[1]].strip():
                        continue
                    pending.append(_classify_comment(tok.string, SourceSpan(start, end)))
                    continue
                if at_line_start:
                    nodes.append(SyntaxNode(SourceSpan(start, end), tuple(pending)))
                    pending = []
                    at_line_start = False
        except (tokenize.TokenError, SyntaxError) as exc:
            raise DocumentParseError(f"Cannot tokenize Python source: {exc}") from exc

        eof = SourceSpan(len(text), len(text))
        nodes.append(SyntaxNode(eof, tuple(pending)))
        return ParsedDocument(text=text, nodes=tuple(nodes))


def _classify_comment(raw: str, span: SourceSpan) -> Trivia:
    start_match = _COMMENT_START_RE.match(raw)
    if start_match:
        return Trivia(
            TriviaKind.REGION_START, span, raw, name=start_match.group(1).strip(),
        )
    if _COMMENT_END_RE.match(raw):
        return Trivia(TriviaKind.REGION_END, span, raw)
    return Trivia(TriviaKind.OTHER, span, raw)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

PARSER_KINDS: dict[str, type[DirectiveLineParser] | type[PythonCommentParser]] = {
    "directive": DirectiveLineParser,
    "python": PythonCommentParser,
}

_EXTENSION_PARSERS: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
}


def parser_for(
    document_name: str,
    overrides: dict[str, str] | None = None,
) -> TriviaParser:
    """Pick a parser from the document's extension.

    ``overrides`` maps extensions (``".csx"``) to parser kinds and wins over
    the built-in table. Unknown extensions get the directive parser.
    """
    suffix = PurePath(document_name).suffix.lower()
    kind = (overrides or {}).get(suffix) or _EXTENSION_PARSERS.get(suffix, "directive")
    try:
        return PARSER_KINDS[kind]()
    except KeyError:
        raise ConfigError(f"Unknown parser kind {kind!r} for {suffix!r}") from None
