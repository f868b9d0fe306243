"""
Segment building and offset compilation.

A segment is a run of consecutive non-table blocks that is written with one
bulk `insertText` followed by one formatting batch. Tables break segments:
they are created through their own multi-step protocol (see
`gdocs/managers/table_operation_manager.py`).

All ranges are compiled relative to the segment start and only turned into
absolute document indices by `plan_segment`, once the live insertion point is
known. Offsets are counted in UTF-16 code units to match the Docs API.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from gdocs.docs_helpers import (
    create_format_text_request,
    create_heading_style_request,
    create_insert_text_request,
    utf16_len,
)
from gdocs.markdown_parser import Blank, Block, CodeBlock, Heading, Paragraph, SpanKind, Table


@dataclass(frozen=True)
class TextRange:
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class HeadingRange(TextRange):
    level: int = 1


@dataclass
class CompiledSegment:
    """Rendered text of a segment plus its style ranges, relative to the segment start."""

    text: str = ""
    heading_ranges: list[HeadingRange] = field(default_factory=list)
    bold_ranges: list[TextRange] = field(default_factory=list)
    italic_ranges: list[TextRange] = field(default_factory=list)
    code_ranges: list[TextRange] = field(default_factory=list)

    @property
    def length(self) -> int:
        return utf16_len(self.text)


@dataclass(frozen=True)
class SegmentPlan:
    """The two request batches that write one segment at a fixed insertion point."""

    insert_at: int
    text: str
    insert_requests: list[dict[str, Any]]
    style_requests: list[dict[str, Any]]

    @property
    def length(self) -> int:
        return utf16_len(self.text)


def renders_content(blocks: list[Block]) -> bool:
    """True when a segment holds anything besides blank lines."""
    return any(not isinstance(block, Blank) for block in blocks)


def iter_segments(blocks: list[Block]) -> Iterator[list[Block] | Table]:
    """
    Group blocks into segments, yielding each table on its own.

    Yields:
        Either a non-empty list of consecutive non-table blocks, or a Table.
    """
    segment: list[Block] = []
    for block in blocks:
        if isinstance(block, Table):
            if segment:
                yield segment
                segment = []
            yield block
        else:
            segment.append(block)
    if segment:
        yield segment


def compile_segment(blocks: list[Block]) -> CompiledSegment:
    """Render a segment's blocks and record style ranges relative to its start."""
    compiled = CompiledSegment()
    parts: list[str] = []
    cursor = 0

    span_targets = {
        SpanKind.BOLD: compiled.bold_ranges,
        SpanKind.ITALIC: compiled.italic_ranges,
        SpanKind.CODE: compiled.code_ranges,
    }

    for block in blocks:
        if isinstance(block, Heading):
            text_len = utf16_len(block.text)
            compiled.heading_ranges.append(HeadingRange(cursor, cursor + text_len, level=block.level))
            rendered = block.text + "\n"

        elif isinstance(block, Paragraph):
            for span in block.spans:
                start = cursor + utf16_len(block.text[: span.start])
                end = cursor + utf16_len(block.text[: span.end])
                span_targets[span.kind].append(TextRange(start, end))
            rendered = block.text + "\n"

        elif isinstance(block, CodeBlock):
            rendered = block.text + "\n"
            # The trailing newline is styled too so the whole block is monospace
            compiled.code_ranges.append(TextRange(cursor, cursor + utf16_len(rendered)))

        elif isinstance(block, Blank):
            rendered = "\n"

        else:
            raise TypeError(f"Cannot render {type(block).__name__} inside a text segment")

        parts.append(rendered)
        cursor += utf16_len(rendered)

    compiled.text = "".join(parts)
    return compiled


def build_style_requests(compiled: CompiledSegment, insert_at: int, code_font: str) -> list[dict[str, Any]]:
    """
    Build the formatting batch for a compiled segment inserted at insert_at.

    Order is load-bearing: heading paragraph styles come first, last heading
    first, then bold, italic and code text styles. Empty ranges are skipped.
    """
    requests: list[dict[str, Any]] = []

    for heading in reversed(compiled.heading_ranges):
        if heading.is_empty:
            continue
        requests.append(create_heading_style_request(insert_at + heading.start, insert_at + heading.end, heading.level))

    text_style_groups = (
        (compiled.bold_ranges, {"bold": True}),
        (compiled.italic_ranges, {"italic": True}),
        (compiled.code_ranges, {"font_family": code_font}),
    )
    for ranges, style in text_style_groups:
        for text_range in ranges:
            if text_range.is_empty:
                continue
            requests.append(
                create_format_text_request(insert_at + text_range.start, insert_at + text_range.end, **style)
            )

    return requests


def plan_segment(blocks: list[Block], insert_at: int, code_font: str) -> SegmentPlan | None:
    """
    Compile a segment into its insert and style requests.

    Pure: the same blocks and insertion point always give equal plans.

    Returns:
        The SegmentPlan, or None when the segment renders nothing worth
        inserting (only blank lines).
    """
    if not renders_content(blocks):
        return None

    compiled = compile_segment(blocks)

    return SegmentPlan(
        insert_at=insert_at,
        text=compiled.text,
        insert_requests=[create_insert_text_request(insert_at, compiled.text)],
        style_requests=build_style_requests(compiled, insert_at, code_font),
    )
