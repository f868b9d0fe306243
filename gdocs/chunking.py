"""Line-aligned, byte-bounded splitting of markdown text."""

import logging

from core.config import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


def split_into_chunks(text: str, max_bytes: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """
    Split text into the fewest line-aligned pieces of at most max_bytes UTF-8 bytes.

    Lines are never split. A single line longer than max_bytes becomes a chunk
    of its own and exceeds the cap. Joining the result gives back the input.
    """
    chunks: list[str] = []
    current: list[str] = []
    current_bytes = 0

    lines = text.split("\n")
    pieces = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        pieces.append(lines[-1])

    for line in pieces:
        line_bytes = len(line.encode("utf-8"))
        if current and current_bytes + line_bytes > max_bytes:
            chunks.append("".join(current))
            current = []
            current_bytes = 0
        current.append(line)
        current_bytes += line_bytes

    if current:
        chunks.append("".join(current))

    oversized = sum(1 for chunk in chunks if len(chunk.encode("utf-8")) > max_bytes)
    if oversized:
        logger.warning(f"{oversized} chunk(s) exceed {max_bytes} bytes because of single long lines")

    return chunks
