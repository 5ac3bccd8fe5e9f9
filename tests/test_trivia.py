"""Tests for regionkit.trivia parsers and parser selection."""
import pytest

from regionkit.errors import ConfigError, DocumentParseError
from regionkit.trivia import (
    DirectiveLineParser,
    PythonCommentParser,
    TriviaKind,
    compute_line_starts,
    parser_for,
)
from regionkit.workspace_types import SourceSpan

from source_fixtures import PYTHON_MODULE


def _markers(text: str, parser: object) -> list[tuple[TriviaKind, str]]:
    parsed = parser.parse(text)  # type: ignore[attr-defined]
    return [
        (t.kind, t.name)
        for t in parsed.iter_trivia()
        if t.kind is not TriviaKind.OTHER
    ]


class TestComputeLineStarts:
    def test_empty(self) -> None:
        assert compute_line_starts("") == [0]

    def test_multiple_lines(self) -> None:
        assert compute_line_starts("ab\ncd\n") == [0, 3, 6]


class TestDirectiveLineParser:
    TEXT = "a;\n    #region alpha\n    var x = 1;\n    #endregion\n"

    def test_marker_spans_exclude_indent_and_newline(self) -> None:
        trivia = DirectiveLineParser().parse(self.TEXT).iter_trivia()
        start, end = trivia
        assert start.kind is TriviaKind.REGION_START
        assert start.span == SourceSpan(7, 20)
        assert start.raw_text == "#region alpha"
        assert start.name == "alpha"
        assert end.kind is TriviaKind.REGION_END
        assert end.span == SourceSpan(40, 50)

    def test_trivia_attach_to_following_node(self) -> None:
        parsed = DirectiveLineParser().parse(self.TEXT)
        assert len(parsed.nodes) == 3  # "a;", "var x = 1;", end of file
        assert parsed.nodes[0].leading_trivia == ()
        assert parsed.nodes[1].leading_trivia[0].kind is TriviaKind.REGION_START
        assert parsed.nodes[2].span == SourceSpan(len(self.TEXT), len(self.TEXT))
        assert parsed.nodes[2].leading_trivia[0].kind is TriviaKind.REGION_END

    def test_crlf_terminator_not_in_span(self) -> None:
        text = "#region a\r\nx\r\n#endregion"
        start, end = DirectiveLineParser().parse(text).iter_trivia()
        assert start.span == SourceSpan(0, 9)
        assert end.span == SourceSpan(14, 24)

    def test_comments_and_blank_lines_are_other(self) -> None:
        text = "// note\n\n#region r\nx();\n#endregion\n"
        kinds = [t.kind for t in DirectiveLineParser().parse(text).iter_trivia()]
        assert kinds == [
            TriviaKind.OTHER,
            TriviaKind.OTHER,
            TriviaKind.REGION_START,
            TriviaKind.REGION_END,
        ]

    def test_keyword_must_end_at_word_boundary(self) -> None:
        assert _markers("#regionfoo\n#endregionbar\n", DirectiveLineParser()) == []

    def test_name_is_trimmed(self) -> None:
        assert _markers("#region   region one  \n#endregion", DirectiveLineParser()) == [
            (TriviaKind.REGION_START, "region one"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_markers_inside_block_comment_are_ignored(self) -> None:
        text = "/*\n#region fake\n*/\nclass C\n{\n#region a\nx();\n#endregion\n}\n"
        assert _markers(text, DirectiveLineParser()) == [
            (TriviaKind.REGION_START, "a"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_block_comment_lines_are_other_trivia(self) -> None:
        text = "/* one\n   two */\nx();\n"
        parsed = DirectiveLineParser().parse(text)
        assert [t.raw_text for t in parsed.nodes[0].leading_trivia] == ["/* one", "two */"]
        assert parsed.nodes[0].span == SourceSpan(17, 21)

    def test_markers_inside_verbatim_string_are_ignored(self) -> None:
        text = 'var s = @"\n#endregion\n""quoted""\n";\n#region a\nx();\n#endregion\n'
        assert _markers(text, DirectiveLineParser()) == [
            (TriviaKind.REGION_START, "a"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_markers_inside_raw_string_are_ignored(self) -> None:
        text = 'var s = """\n#region raw\n""";\n#region a\nx();\n#endregion\n'
        assert _markers(text, DirectiveLineParser()) == [
            (TriviaKind.REGION_START, "a"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_comment_openers_inside_string_literals(self) -> None:
        text = 'var url = "http://x/*";\nvar c = \'"\';\n#region a\nx();\n#endregion\n'
        assert _markers(text, DirectiveLineParser()) == [
            (TriviaKind.REGION_START, "a"),
            (TriviaKind.REGION_END, ""),
        ]


class TestPythonCommentParser:
    def test_only_standalone_comments_are_markers(self) -> None:
        assert _markers(PYTHON_MODULE, PythonCommentParser()) == [
            (TriviaKind.REGION_START, "setup"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_compact_marker_style(self) -> None:
        text = "#region fast\nx = 1\n#endregion\n"
        assert _markers(text, PythonCommentParser()) == [
            (TriviaKind.REGION_START, "fast"),
            (TriviaKind.REGION_END, ""),
        ]

    def test_comment_span_offsets(self) -> None:
        text = "if x:\n    # region body\n    y = 2\n    # endregion\n"
        start, end = PythonCommentParser().parse(text).iter_trivia()
        assert start.span == SourceSpan(10, 23)
        assert start.span.slice(text) == "# region body"
        assert end.span.slice(text) == "# endregion"

    def test_unterminated_source_raises(self) -> None:
        with pytest.raises(DocumentParseError):
            PythonCommentParser().parse("x = (\n")


class TestParserFor:
    def test_python_extension(self) -> None:
        assert isinstance(parser_for("scripts/demo.py"), PythonCommentParser)

    def test_csharp_and_unknown_extensions(self) -> None:
        assert isinstance(parser_for("Program.cs"), DirectiveLineParser)
        assert isinstance(parser_for("notes"), DirectiveLineParser)

    def test_override_wins(self) -> None:
        assert isinstance(
            parser_for("build.CSX", {".csx": "python"}), PythonCommentParser,
        )

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ConfigError):
            parser_for("a.cs", {".cs": "roslyn"})
