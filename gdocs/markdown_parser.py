"""
Markdown block and inline parsing for Google Docs insertion.

This module turns markdown text into an ordered list of typed blocks that the
segment builder (`gdocs/segments.py`) can render into a single bulk
`insertText` plus a batch of style updates.

The parser is deliberately line oriented: each chunk produced by
`gdocs/chunking.py` must be parseable on its own, so no construct may depend on
state carried over from a previous chunk.

Supported subset:
    - ATX headings, levels 1-4
    - Fenced code blocks (rendered verbatim in the code font)
    - Pipe tables (header divider rows dropped)
    - Bullet, numbered and checkbox list items (rendered with literal prefixes)
    - Paragraphs with **bold**, *italic* and `code` spans
    - Blank lines and `---` (both rendered as an empty line)

Example:
    >>> blocks = parse_markdown("# Title\\n\\nSome **bold** text.\\n")
    >>> [type(b).__name__ for b in blocks]
    ['Heading', 'Blank', 'Paragraph']
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

# Task list checkbox characters (Unicode ballot box symbols)
CHECKBOX_UNCHECKED = "☐"  # U+2610 BALLOT BOX
CHECKBOX_CHECKED = "☑"  # U+2611 BALLOT BOX WITH CHECK
BULLET_GLYPH = "•"  # U+2022 BULLET

# Heading prefixes, longest first so "#### " is never taken for "# "
HEADING_PREFIXES: tuple[tuple[str, int], ...] = (
    ("#### ", 4),
    ("### ", 3),
    ("## ", 2),
    ("# ", 1),
)

CODE_FENCE = "```"
HORIZONTAL_RULE = "---"

CHECKBOX_PATTERN = re.compile(r"^[-*] \[([ xX])\] ")
BULLET_PATTERN = re.compile(r"^[-*] ")
NUMBERED_PATTERN = re.compile(r"^(\d+\. )(.*)$")
DIVIDER_CELL_PATTERN = re.compile(r"^[-: ]+$")


class SpanKind(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"


@dataclass(frozen=True)
class Span:
    """An inline style range, half-open, in rendered-text coordinates."""

    kind: SpanKind
    start: int
    end: int

    def shifted(self, offset: int) -> Span:
        return Span(self.kind, self.start + offset, self.end + offset)


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str
    spans: tuple[Span, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CodeBlock:
    text: str
    language: str = ""


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[str, ...], ...]

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_columns(self) -> int:
        return max((len(row) for row in self.rows), default=0)


@dataclass(frozen=True)
class Blank:
    pass


Block = Heading | Paragraph | CodeBlock | Table | Blank


def parse_inline(line: str) -> tuple[str, list[Span]]:
    """
    Strip **bold**, *italic* and `code` markers from one line of text.

    Scans left to right with one character of look-ahead; the first marker
    that matches at a position wins and there is no backtracking across kinds.
    Markers without a closing partner are kept as literal characters.

    Args:
        line: A single line of markdown text.

    Returns:
        Tuple of (rendered_text, spans). Span offsets count rendered
        characters only, and spans are ordered by start.
    """
    parts: list[str] = []
    spans: list[Span] = []
    out_len = 0
    pos = 0
    length = len(line)

    def emit(kind: SpanKind, content: str) -> None:
        nonlocal out_len
        spans.append(Span(kind, out_len, out_len + len(content)))
        parts.append(content)
        out_len += len(content)

    while pos < length:
        if line.startswith("**", pos):
            end_pos = line.find("**", pos + 2)
            if end_pos != -1:
                emit(SpanKind.BOLD, line[pos + 2 : end_pos])
                pos = end_pos + 2
                continue
        elif line[pos] == "`" and not line.startswith("``", pos):
            end_pos = line.find("`", pos + 1)
            if end_pos != -1:
                emit(SpanKind.CODE, line[pos + 1 : end_pos])
                pos = end_pos + 1
                continue
        elif line[pos] == "*":
            end_pos = line.find("*", pos + 1)
            if end_pos != -1 and not line.startswith("**", end_pos):
                emit(SpanKind.ITALIC, line[pos + 1 : end_pos])
                pos = end_pos + 1
                continue

        parts.append(line[pos])
        out_len += 1
        pos += 1

    # Empty pairs such as "****" render nothing and carry no style
    return "".join(parts), [span for span in spans if span.end > span.start]


def _prefixed_paragraph(prefix: str, body: str) -> Paragraph:
    plain, spans = parse_inline(body)
    return Paragraph(prefix + plain, tuple(span.shifted(len(prefix)) for span in spans))


def _is_table_line(line: str) -> bool:
    return len(line) >= 2 and line.startswith("|") and line.endswith("|")


def _split_table_row(line: str) -> list[str]:
    return [cell.strip() for cell in line[1:-1].split("|")]


def _is_divider_row(cells: list[str]) -> bool:
    return all(DIVIDER_CELL_PATTERN.match(cell) for cell in cells)


def parse_markdown(markdown: str) -> list[Block]:
    """
    Parse markdown into an ordered list of blocks.

    Lines are right-stripped before dispatch. Rules are tried in priority
    order: heading, code fence, table, checkbox item, bullet item, numbered
    item, blank/rule, paragraph.

    Args:
        markdown: Markdown text, typically one chunk of a larger document.

    Returns:
        Ordered list of Heading, Paragraph, CodeBlock, Table and Blank blocks.
    """
    blocks: list[Block] = []
    # Only "\n" ends a line; U+2028 and friends stay inside their paragraph
    lines = [line.rstrip() for line in markdown.split("\n")]
    if lines[-1] == "":
        lines.pop()
    i = 0

    while i < len(lines):
        line = lines[i]

        heading = next(((prefix, level) for prefix, level in HEADING_PREFIXES if line.startswith(prefix)), None)
        if heading is not None:
            prefix, level = heading
            blocks.append(Heading(level, line[len(prefix) :]))

        elif line.startswith(CODE_FENCE):
            language = line[len(CODE_FENCE) :].strip()
            i += 1
            code_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith(CODE_FENCE):
                code_lines.append(lines[i])
                i += 1
            # An unterminated fence runs to end of input
            blocks.append(CodeBlock("\n".join(code_lines), language))

        elif _is_table_line(line):
            rows: list[tuple[str, ...]] = []
            while i < len(lines) and _is_table_line(lines[i]):
                cells = _split_table_row(lines[i])
                if not _is_divider_row(cells):
                    rows.append(tuple(parse_inline(cell)[0] for cell in cells))
                i += 1
            if rows:
                blocks.append(Table(tuple(rows)))
            else:
                logger.debug("Dropping table with no data rows")
            continue

        elif match := CHECKBOX_PATTERN.match(line):
            glyph = CHECKBOX_UNCHECKED if match.group(1) == " " else CHECKBOX_CHECKED
            blocks.append(_prefixed_paragraph(f"{glyph} ", line[match.end() :]))

        elif BULLET_PATTERN.match(line):
            blocks.append(_prefixed_paragraph(f"{BULLET_GLYPH} ", line[2:]))

        elif match := NUMBERED_PATTERN.match(line):
            blocks.append(_prefixed_paragraph(match.group(1), match.group(2)))

        elif not line or line == HORIZONTAL_RULE:
            blocks.append(Blank())

        else:
            plain, spans = parse_inline(line)
            blocks.append(Paragraph(plain, tuple(spans)))

        i += 1

    return blocks


def count_blocks(blocks: list[Block]) -> dict[str, int]:
    """Summarize a block list for progress logging."""
    return {
        "blocks": len(blocks),
        "tables": sum(1 for block in blocks if isinstance(block, Table)),
        "code": sum(1 for block in blocks if isinstance(block, CodeBlock)),
    }
