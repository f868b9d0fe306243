"""
Google Docs request builders.

Small pure functions that build the request dictionaries accepted by
`documents().batchUpdate`. Keeping them here means the planners can be tested
by comparing plain dictionaries.
"""

from typing import Any

HEADING_STYLE_MAP: dict[int, str] = {
    1: "HEADING_1",
    2: "HEADING_2",
    3: "HEADING_3",
    4: "HEADING_4",
}


def utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units, the unit Docs API indices are counted in."""
    return len(text.encode("utf-16-le")) // 2


def build_text_style(
    bold: bool | None = None,
    italic: bool | None = None,
    font_family: str | None = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Build a textStyle object and its field mask.

    Returns:
        Tuple of (text_style_dict, list_of_field_names)
    """
    text_style: dict[str, Any] = {}
    fields: list[str] = []

    if bold is not None:
        text_style["bold"] = bold
        fields.append("bold")

    if italic is not None:
        text_style["italic"] = italic
        fields.append("italic")

    if font_family is not None:
        text_style["weightedFontFamily"] = {"fontFamily": font_family}
        fields.append("weightedFontFamily")

    return text_style, fields


def create_insert_text_request(index: int, text: str) -> dict[str, Any]:
    return {"insertText": {"location": {"index": index}, "text": text}}


def create_delete_range_request(start_index: int, end_index: int) -> dict[str, Any]:
    return {"deleteContentRange": {"range": {"startIndex": start_index, "endIndex": end_index}}}


def create_format_text_request(
    start_index: int,
    end_index: int,
    bold: bool | None = None,
    italic: bool | None = None,
    font_family: str | None = None,
) -> dict[str, Any] | None:
    """Build an updateTextStyle request, or None when no style was given."""
    text_style, fields = build_text_style(bold=bold, italic=italic, font_family=font_family)
    if not text_style:
        return None

    return {
        "updateTextStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "textStyle": text_style,
            "fields": ",".join(fields),
        }
    }


def create_heading_style_request(start_index: int, end_index: int, level: int) -> dict[str, Any]:
    """Build an updateParagraphStyle request applying HEADING_<level>."""
    return {
        "updateParagraphStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "paragraphStyle": {"namedStyleType": HEADING_STYLE_MAP[level]},
            "fields": "namedStyleType",
        }
    }


def create_insert_table_request(index: int, rows: int, columns: int) -> dict[str, Any]:
    return {"insertTable": {"location": {"index": index}, "rows": rows, "columns": columns}}


def create_insert_image_request(
    index: int,
    image_uri: str,
    width_pt: float | None = None,
    height_pt: float | None = None,
) -> dict[str, Any]:
    request: dict[str, Any] = {"insertInlineImage": {"location": {"index": index}, "uri": image_uri}}

    if width_pt or height_pt:
        object_size: dict[str, Any] = {}
        if width_pt:
            object_size["width"] = {"magnitude": width_pt, "unit": "PT"}
        if height_pt:
            object_size["height"] = {"magnitude": height_pt, "unit": "PT"}
        request["insertInlineImage"]["objectSize"] = object_size

    return request
