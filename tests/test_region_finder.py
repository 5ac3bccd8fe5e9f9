"""Tests for regionkit.region_finder module."""
import pytest

from regionkit.errors import UnbalancedRegionError
from regionkit.region_finder import (
    UnbalancedMarker,
    extract_buffers,
    find_regions,
    match_regions,
)
from regionkit.trivia import Trivia, TriviaKind
from regionkit.workspace_types import BufferId, Err, Ok, SourceSpan

from source_fixtures import (
    CONSOLE_PROGRAM_MULTIPLE_REGIONS,
    CONSOLE_PROGRAM_SINGLE_REGION,
    NESTED_REGIONS,
    PYTHON_MODULE,
)


def _start(offset: int, name: str) -> Trivia:
    raw = f"#region {name}"
    return Trivia(TriviaKind.REGION_START, SourceSpan(offset, offset + len(raw)), raw, name)


def _end(offset: int) -> Trivia:
    return Trivia(TriviaKind.REGION_END, SourceSpan(offset, offset + 10), "#endregion")


class TestMatchRegions:
    def test_pairs_in_close_order(self) -> None:
        trivia = [_start(0, "outer"), _start(20, "inner"), _end(40), _end(60)]
        result = match_regions(trivia, "doc")
        assert isinstance(result, Ok)
        assert [r.name for r in result.value] == ["inner", "outer"]
        assert result.value[1].label == "doc@outer"

    def test_stray_end_marker_is_err(self) -> None:
        result = match_regions([_end(5)], "doc")
        assert result == Err(UnbalancedMarker(5, "end marker has no open region to close"))

    def test_dangling_start_marker_is_err(self) -> None:
        result = match_regions([_start(0, "a"), _start(12, "b"), _end(30)], "doc")
        assert isinstance(result, Err)
        assert result.error.offset == 0
        assert "'a'" in result.error.reason

    def test_duplicate_trivia_counted_once(self) -> None:
        start, end = _start(0, "a"), _end(20)
        result = match_regions([start, start, end, end], "doc")
        assert isinstance(result, Ok)
        assert len(result.value) == 1

    def test_other_trivia_ignored(self) -> None:
        other = Trivia(TriviaKind.OTHER, SourceSpan(0, 7), "// note")
        result = match_regions([other], "doc")
        assert result == Ok(())

    def test_content_span_excludes_markers(self) -> None:
        result = match_regions([_start(0, "a"), _end(20)], "doc")
        assert isinstance(result, Ok)
        assert result.value[0].content_span == SourceSpan(9, 20)


class TestFindRegions:
    def test_label_combines_document_and_region(self) -> None:
        regions = find_regions(CONSOLE_PROGRAM_SINGLE_REGION, "Program.cs")
        assert [r.label for r in regions] == ["Program.cs@alpha"]

    def test_unclosed_region_raises(self) -> None:
        with pytest.raises(UnbalancedRegionError) as excinfo:
            find_regions("#region a\nx();\n", "Program.cs")
        assert excinfo.value.document_name == "Program.cs"
        assert excinfo.value.offset == 0

    def test_unopened_region_raises(self) -> None:
        with pytest.raises(UnbalancedRegionError):
            find_regions("x();\n#endregion\n", "Program.cs")

    def test_commented_out_region_is_not_a_region(self) -> None:
        text = "/*\n#region fake\n*/\n#region a\nx();\n#endregion\n"
        assert [r.name for r in find_regions(text, "Program.cs")] == ["a"]

    def test_end_marker_inside_verbatim_string_is_text(self) -> None:
        text = 'var s = @"\n#endregion\n";\n#region a\nx();\n#endregion\n'
        assert [r.name for r in find_regions(text, "Program.cs")] == ["a"]


class TestExtractBuffers:
    def test_single_region(self) -> None:
        buffers = extract_buffers(CONSOLE_PROGRAM_SINGLE_REGION, "Program.cs")
        assert len(buffers) == 1
        buffer = buffers[0]
        assert buffer.id == BufferId("Program.cs", "alpha")
        assert str(buffer.id) == "Program.cs@alpha"
        assert buffer.content == "var a = 10;"
        assert buffer.position == 0
        assert buffer.absolute_position is None

    def test_multiple_regions_in_order(self) -> None:
        buffers = extract_buffers(CONSOLE_PROGRAM_MULTIPLE_REGIONS, "Program.cs")
        assert [(b.id.region_label, b.content) for b in buffers] == [
            ("alpha", "var a = 10;"),
            ("beta", "var b = 20;"),
        ]

    def test_nested_regions_inner_first(self) -> None:
        buffers = extract_buffers(NESTED_REGIONS, "M.cs")
        assert [b.id.region_label for b in buffers] == ["inner", "outer"]
        assert buffers[0].content == "var b = 2;"
        assert buffers[1].content == (
            "var a = 1;\n#region inner\nvar b = 2;\n#endregion"
        )

    def test_multiline_body_is_dedented(self) -> None:
        text = (
            "        #region multi\n"
            "        if (x)\n"
            "        {\n"
            "            y();\n"
            "        }\n"
            "        #endregion\n"
        )
        [buffer] = extract_buffers(text, "a.cs")
        assert buffer.content == "if (x)\n{\n    y();\n}"

    def test_no_markers_yields_nothing(self) -> None:
        assert extract_buffers("class C {}\n", "C.cs") == []

    def test_duplicate_names_both_emitted(self) -> None:
        text = "#region a\nx();\n#endregion\n#region a\ny();\n#endregion\n"
        buffers = extract_buffers(text, "d.cs")
        assert [b.id for b in buffers] == [BufferId("d.cs", "a"), BufferId("d.cs", "a")]
        assert [b.content for b in buffers] == ["x();", "y();"]

    def test_empty_region(self) -> None:
        [buffer] = extract_buffers("#region empty\n#endregion\n", "e.cs")
        assert buffer.content == ""

    def test_unbalanced_markers_fail(self) -> None:
        with pytest.raises(UnbalancedRegionError):
            extract_buffers("#region open\nvar a = 1;\n", "Program.cs")

    def test_python_document(self) -> None:
        buffers = extract_buffers(PYTHON_MODULE, "module.py")
        assert [(str(b.id), b.content) for b in buffers] == [
            ("module.py@setup", "root = os.getcwd()"),
        ]
