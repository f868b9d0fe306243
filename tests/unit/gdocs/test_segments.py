"""
Unit tests for segment building and offset compilation.

Tests cover:
- Grouping blocks into segments around tables
- Rendered text and style ranges per block type
- UTF-16 offsets for characters outside the BMP
- Style request ordering and plan determinism
"""

import pytest

from gdocs.markdown_parser import Blank, CodeBlock, Heading, Paragraph, Span, SpanKind, Table, parse_markdown
from gdocs.segments import (
    HeadingRange,
    TextRange,
    build_style_requests,
    compile_segment,
    iter_segments,
    plan_segment,
    renders_content,
)


class TestIterSegments:
    def test_tables_split_segments(self):
        table = Table((("a",),))
        blocks = [Paragraph("one"), table, Paragraph("two"), Blank()]
        assert list(iter_segments(blocks)) == [[Paragraph("one")], table, [Paragraph("two"), Blank()]]

    def test_leading_and_adjacent_tables(self):
        first, second = Table((("a",),)), Table((("b",),))
        assert list(iter_segments([first, second])) == [first, second]

    def test_empty_input(self):
        assert list(iter_segments([])) == []


class TestRendersContent:
    def test_blank_only_segment_renders_nothing(self):
        assert renders_content([Blank(), Blank()]) is False

    def test_any_text_block_renders(self):
        assert renders_content([Blank(), Paragraph("")]) is True


class TestCompileSegment:
    def test_heading_range_excludes_newline(self):
        compiled = compile_segment([Heading(2, "Title")])
        assert compiled.text == "Title\n"
        assert compiled.heading_ranges == [HeadingRange(0, 5, level=2)]

    def test_paragraph_spans_offset_by_cursor(self):
        compiled = compile_segment([Paragraph("ab"), Paragraph("x y", (Span(SpanKind.BOLD, 2, 3),))])
        assert compiled.text == "ab\nx y\n"
        assert compiled.bold_ranges == [TextRange(5, 6)]

    def test_code_block_range_includes_newline(self):
        compiled = compile_segment([Blank(), CodeBlock("a = 1\nb = 2", "python")])
        assert compiled.text == "\na = 1\nb = 2\n"
        assert compiled.code_ranges == [TextRange(1, 13)]

    def test_blank_renders_bare_newline(self):
        compiled = compile_segment([Blank()])
        assert compiled.text == "\n"
        assert compiled.bold_ranges == compiled.italic_ranges == compiled.code_ranges == []

    def test_offsets_count_utf16_units(self):
        # U+1F600 takes two UTF-16 code units
        compiled = compile_segment([Paragraph("\U0001f600 b", (Span(SpanKind.ITALIC, 2, 3),))])
        assert compiled.italic_ranges == [TextRange(3, 4)]
        assert compiled.length == 5

    def test_table_block_is_rejected(self):
        with pytest.raises(TypeError):
            compile_segment([Table((("a",),))])


class TestBuildStyleRequests:
    def test_order_headings_reversed_then_bold_italic_code(self):
        blocks = parse_markdown("# One\n## Two\n**b** *i* `c`\n")
        compiled = compile_segment(blocks)
        requests = build_style_requests(compiled, insert_at=10, code_font="Consolas")

        kinds = [next(iter(request)) for request in requests]
        assert kinds == [
            "updateParagraphStyle",
            "updateParagraphStyle",
            "updateTextStyle",
            "updateTextStyle",
            "updateTextStyle",
        ]
        assert requests[0]["updateParagraphStyle"]["paragraphStyle"]["namedStyleType"] == "HEADING_2"
        assert requests[1]["updateParagraphStyle"]["paragraphStyle"]["namedStyleType"] == "HEADING_1"
        assert requests[2]["updateTextStyle"]["textStyle"] == {"bold": True}
        assert requests[3]["updateTextStyle"]["textStyle"] == {"italic": True}
        assert requests[4]["updateTextStyle"]["textStyle"] == {"weightedFontFamily": {"fontFamily": "Consolas"}}

    def test_ranges_are_absolute(self):
        compiled = compile_segment([Heading(1, "Hi")])
        request = build_style_requests(compiled, insert_at=42, code_font="Consolas")[0]
        assert request["updateParagraphStyle"]["range"] == {"startIndex": 42, "endIndex": 44}

    def test_empty_heading_is_skipped(self):
        compiled = compile_segment([Heading(1, "")])
        assert build_style_requests(compiled, insert_at=1, code_font="Consolas") == []


class TestPlanSegment:
    def test_plan_is_deterministic(self):
        blocks = parse_markdown("# T\n\nSome **bold** and *italic*.\n```\ncode\n```\n")
        assert plan_segment(blocks, 7, "Consolas") == plan_segment(blocks, 7, "Consolas")

    def test_single_insert_request(self):
        plan = plan_segment([Heading(1, "Title"), Paragraph("body")], 1, "Consolas")
        assert plan.insert_requests == [{"insertText": {"location": {"index": 1}, "text": "Title\nbody\n"}}]
        assert plan.length == 11

    def test_blank_only_segment_has_no_plan(self):
        assert plan_segment([Blank(), Blank()], 1, "Consolas") is None
