"""
Unit tests for Google Docs request builders and document structure helpers.

Tests cover:
- Text style building and field masks
- Request builders (insert, delete, format, heading, table, image)
- End index, table lookup and placeholder search over documents().get JSON
"""

from gdocs.docs_helpers import (
    build_text_style,
    create_delete_range_request,
    create_format_text_request,
    create_heading_style_request,
    create_insert_image_request,
    create_insert_table_request,
    utf16_len,
)
from gdocs.docs_structure import (
    ParagraphLocation,
    find_placeholder_paragraphs,
    find_table_at_or_after,
    get_end_index,
    get_table_cell,
)


def _paragraph(start, text):
    return {
        "startIndex": start,
        "endIndex": start + len(text),
        "paragraph": {"elements": [{"textRun": {"content": text}}]},
    }


class TestBuildTextStyle:
    """Tests for text style building."""

    def test_bold_only(self):
        style, fields = build_text_style(bold=True)
        assert style == {"bold": True}
        assert fields == ["bold"]

    def test_font_family(self):
        style, fields = build_text_style(font_family="Consolas")
        assert style["weightedFontFamily"]["fontFamily"] == "Consolas"
        assert fields == ["weightedFontFamily"]

    def test_nothing_set(self):
        assert build_text_style() == ({}, [])


class TestRequestBuilders:
    """Tests for batchUpdate request builders."""

    def test_format_request_fields_are_comma_joined(self):
        request = create_format_text_request(5, 10, bold=True, italic=True)
        assert request["updateTextStyle"]["fields"] == "bold,italic"
        assert request["updateTextStyle"]["range"] == {"startIndex": 5, "endIndex": 10}

    def test_format_request_without_style_is_none(self):
        assert create_format_text_request(5, 10) is None

    def test_heading_request(self):
        request = create_heading_style_request(1, 6, 3)
        assert request["updateParagraphStyle"]["paragraphStyle"] == {"namedStyleType": "HEADING_3"}
        assert request["updateParagraphStyle"]["fields"] == "namedStyleType"

    def test_delete_request(self):
        assert create_delete_range_request(3, 9) == {"deleteContentRange": {"range": {"startIndex": 3, "endIndex": 9}}}

    def test_table_request(self):
        request = create_insert_table_request(12, 3, 2)
        assert request == {"insertTable": {"location": {"index": 12}, "rows": 3, "columns": 2}}

    def test_image_request_with_size(self):
        request = create_insert_image_request(4, "https://example.com/a.png", 440, 280)
        size = request["insertInlineImage"]["objectSize"]
        assert size["width"] == {"magnitude": 440, "unit": "PT"}
        assert size["height"] == {"magnitude": 280, "unit": "PT"}

    def test_image_request_without_size(self):
        request = create_insert_image_request(4, "https://example.com/a.png")
        assert "objectSize" not in request["insertInlineImage"]

    def test_utf16_len(self):
        assert utf16_len("abc") == 3
        assert utf16_len("\U0001f600") == 2


class TestDocumentStructure:
    """Tests for read-only document inspection."""

    def test_end_index_is_before_final_newline(self):
        doc = {"body": {"content": [{"endIndex": 1, "sectionBreak": {}}, _paragraph(1, "hello\n")]}}
        assert get_end_index(doc) == 6

    def test_end_index_of_empty_body(self):
        assert get_end_index({"body": {"content": []}}) == 1

    def test_find_table_at_or_after(self):
        early = {"startIndex": 2, "endIndex": 10, "table": {}}
        late = {"startIndex": 20, "endIndex": 30, "table": {}}
        doc = {"body": {"content": [early, _paragraph(10, "x\n"), late]}}
        assert find_table_at_or_after(doc, 2) is early
        assert find_table_at_or_after(doc, 11) is late
        assert find_table_at_or_after(doc, 21) is None

    def test_get_table_cell_out_of_range(self):
        element = {"table": {"tableRows": [{"tableCells": [{"startIndex": 3, "endIndex": 5}]}]}}
        assert get_table_cell(element, 0, 0) == {"startIndex": 3, "endIndex": 5}
        assert get_table_cell(element, 0, 1) is None
        assert get_table_cell(element, 1, 0) is None

    def test_find_placeholder_paragraphs(self):
        doc = {
            "body": {
                "content": [
                    _paragraph(1, "intro\n"),
                    _paragraph(7, "[IMG]\n"),
                    _paragraph(13, "text\n"),
                    _paragraph(18, "[IMG]\n"),
                ]
            }
        }
        assert find_placeholder_paragraphs(doc, "[IMG]") == [ParagraphLocation(7, 13), ParagraphLocation(18, 24)]
