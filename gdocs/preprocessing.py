"""
Markdown preprocessing ahead of block parsing.

Diagrams cannot be rendered by the Docs API, and local images cannot be
inserted until they have been uploaded somewhere the API can fetch them. Both
are therefore swapped for a fixed placeholder line here; the image pass
(`gdocs/managers/image_operation_manager.py`) later finds those placeholder
paragraphs in the live document and replaces them with inline images.

Diagrams and images share a single placeholder stream, so the ordinal stored
on each ImageRef is its position among *all* placeholders emitted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import unquote

from markdown_it import MarkdownIt

from core.config import DEFAULT_DIAGRAM_LANGUAGE, DEFAULT_PLACEHOLDER
from gdocs.markdown_parser import CODE_FENCE

logger = logging.getLogger(__name__)

# A whole line holding one image reference; the path may contain spaces
IMAGE_LINE_PATTERN = re.compile(r"^!\[([^\]]*)\]\(([^()]*)\)$")


@dataclass(frozen=True)
class ImageRef:
    """A local image reference lifted out of the markdown.

    Attributes:
        alt_text: The image's alt text.
        path: The image path as written in the markdown (URL-decoded).
        ordinal: 0-based position of its placeholder among all placeholders.
    """

    alt_text: str
    path: str
    ordinal: int


@dataclass
class PreprocessResult:
    text: str
    images: list[ImageRef] = field(default_factory=list)
    placeholder_count: int = 0


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _fence_end(lines: list[str], start: int) -> int:
    """Index just past the fence opened at start: its closing line, or end of input."""
    i = start + 1
    while i < len(lines) and not lines[i].rstrip().startswith(CODE_FENCE):
        i += 1
    return min(i + 1, len(lines))


def _parse_image_line(md: MarkdownIt, line: str) -> tuple[str, str] | None:
    """Return (alt, path) if the line consists of exactly one image reference."""
    stripped = line.strip()
    if not stripped.startswith("!["):
        return None

    inline_tokens = md.parseInline(stripped)
    children = inline_tokens[0].children if inline_tokens else None
    if children and len(children) == 1 and children[0].type == "image" and children[0].attrGet("src"):
        image = children[0]
        return image.content, unquote(str(image.attrGet("src")))

    # CommonMark rejects bare destinations with spaces; the line rule still takes them
    match = IMAGE_LINE_PATTERN.match(stripped)
    if match is None or not match.group(2).strip():
        return None
    return match.group(1), unquote(match.group(2).strip())


def preprocess_markdown(
    markdown: str,
    placeholder: str = DEFAULT_PLACEHOLDER,
    diagram_language: str = DEFAULT_DIAGRAM_LANGUAGE,
) -> PreprocessResult:
    """
    Replace diagram fences and standalone image lines with a placeholder line.

    Fences are found with the same line rule the block parser uses, so a
    fence the parser would render is never missed here. Lines inside other
    fences are copied verbatim.

    Args:
        markdown: The full markdown source.
        placeholder: Text of the placeholder line.
        diagram_language: Fence info string marking a diagram (e.g. "mermaid").

    Returns:
        PreprocessResult with the transformed text and the image references
        in placeholder order.
    """
    md = MarkdownIt("commonmark")
    text = _normalize_newlines(markdown)
    lines = text.split("\n")

    output: list[str] = []
    images: list[ImageRef] = []
    placeholders = 0
    i = 0

    while i < len(lines):
        line = lines[i].rstrip()
        if line.startswith(CODE_FENCE):
            end = _fence_end(lines, i)
            if line[len(CODE_FENCE) :].strip() == diagram_language:
                logger.debug(f"Replacing {diagram_language} diagram at lines {i}-{end} with placeholder")
                output.append(placeholder)
                placeholders += 1
            else:
                output.extend(lines[i:end])
            i = end
            continue

        image = _parse_image_line(md, lines[i])
        if image is not None:
            alt_text, path = image
            images.append(ImageRef(alt_text=alt_text, path=path, ordinal=placeholders))
            output.append(placeholder)
            placeholders += 1
        else:
            output.append(lines[i])
        i += 1

    # An unterminated diagram fence swallows the final newline; restore it
    result = "\n".join(output)
    if text.endswith("\n") and not result.endswith("\n"):
        result += "\n"

    logger.info(f"Preprocessed markdown: {placeholders} placeholder(s), {len(images)} image(s)")
    return PreprocessResult(text=result, images=images, placeholder_count=placeholders)
