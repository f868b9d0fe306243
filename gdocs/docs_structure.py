"""
Google Docs Document Structure Inspection

Read-only helpers over the JSON returned by `documents().get`. Every function
takes a freshly fetched document; nothing here caches indices, because any
mutation can shift them.
"""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParagraphLocation:
    """Start/end indices of a top-level paragraph (end includes its newline)."""

    start_index: int
    end_index: int


def get_body_content(doc: dict[str, Any]) -> list[dict[str, Any]]:
    return doc.get("body", {}).get("content", [])


def get_end_index(doc: dict[str, Any]) -> int:
    """
    The insertion point for appended content.

    One less than the end index of the last top-level structural element, i.e.
    just before the final newline every document body ends with.
    """
    content = get_body_content(doc)
    if not content:
        return 1
    return content[-1].get("endIndex", 2) - 1


def find_table_at_or_after(doc: dict[str, Any], min_start_index: int) -> dict[str, Any] | None:
    """Return the first top-level table element starting at or after min_start_index."""
    for element in get_body_content(doc):
        if "table" in element and element.get("startIndex", 0) >= min_start_index:
            return element
    return None


def get_table_cell(table_element: dict[str, Any], row: int, column: int) -> dict[str, Any] | None:
    """Address a cell by its row/column position in the table's own structure."""
    table_rows = table_element.get("table", {}).get("tableRows", [])
    if row >= len(table_rows):
        return None
    cells = table_rows[row].get("tableCells", [])
    if column >= len(cells):
        return None
    return cells[column]


def get_paragraph_text(element: dict[str, Any]) -> str:
    """Concatenate the text runs of a paragraph element."""
    paragraph = element.get("paragraph")
    if not paragraph:
        return ""
    return "".join(pe.get("textRun", {}).get("content", "") for pe in paragraph.get("elements", []))


def find_placeholder_paragraphs(doc: dict[str, Any], placeholder: str) -> list[ParagraphLocation]:
    """Locate top-level paragraphs containing the placeholder text, in document order."""
    matches = [
        ParagraphLocation(element["startIndex"], element["endIndex"])
        for element in get_body_content(doc)
        if "paragraph" in element and placeholder in get_paragraph_text(element)
    ]
    logger.debug(f"Found {len(matches)} placeholder paragraph(s)")
    return matches
