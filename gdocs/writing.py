"""
Google Docs Markdown Insertion

Drives a full insertion run:

    preprocess -> clear below template (optional) -> chunk ->
    per chunk: parse, write segments and tables -> image pass (optional) ->
    status record

Chunks are isolated from each other: a chunk that fails is logged, followed by
a recovery pause, and the run continues with the next chunk. Edits a failed
chunk already applied stay in the document; the status record reports how
many chunks failed so the caller can inspect the document and re-run the
remaining tail.
"""

import asyncio
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any

from googleapiclient.errors import HttpError

from core.config import InsertConfig
from core.errors import DocInsertError, RateLimitError, ValidationError
from core.utils import TransientNetworkError, validate_document_id
from gdocs.chunking import split_into_chunks
from gdocs.docs_helpers import create_delete_range_request
from gdocs.managers import (
    BatchOperationManager,
    ImageOperationManager,
    SegmentOperationManager,
    TableOperationManager,
)
from gdocs.managers.image_operation_manager import IMAGE_ERRORS
from gdocs.markdown_parser import Table, count_blocks, parse_markdown
from gdocs.preprocessing import preprocess_markdown
from gdocs.segments import SegmentPlan, iter_segments, plan_segment

logger = logging.getLogger(__name__)

OPERATION_NAME = "insert_markdown_to_doc"

CHUNK_ERRORS = (DocInsertError, TransientNetworkError, HttpError, OSError)


@dataclass
class InsertResult:
    """Final status record of an insertion run."""

    document_id: str
    chunks_processed: int = 0
    chunks_failed: int = 0
    images_found: int = 0
    images_inserted: int = 0
    images_failed: int = 0
    end_index: int | None = None
    dry_run: bool = False
    operation: str = OPERATION_NAME

    @property
    def status(self) -> str:
        return "partial" if self.chunks_failed or self.images_failed else "success"

    def to_dict(self) -> dict[str, Any]:
        data = {"status": self.status}
        data.update(asdict(self))
        return data


@dataclass
class ChunkPlan:
    """What a chunk would write, computed without touching the document."""

    index: int
    segments: list[SegmentPlan] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)

    @property
    def request_count(self) -> int:
        return sum(len(plan.insert_requests) + len(plan.style_requests) for plan in self.segments)


class MarkdownInserter:
    """
    Appends markdown to an existing Google Doc, chunk by chunk.

    Example:
        >>> inserter = MarkdownInserter(docs_service, "1AbC...", InsertConfig())
        >>> result = await inserter.run(markdown_text)
        >>> result.to_dict()["status"]
        'success'
    """

    def __init__(
        self,
        docs_service: Any,
        document_id: str,
        config: InsertConfig | None = None,
        drive_service: Any = None,
    ):
        self.document_id = validate_document_id(document_id)
        self.config = config or InsertConfig()
        self.config.validate()
        self.drive_service = drive_service

        pacing = self.config.pacing
        self.batch_manager = BatchOperationManager(
            docs_service, self.document_id, pacing, self.config.batch_slice_size
        )
        self.segment_manager = SegmentOperationManager(self.batch_manager, pacing, self.config.code_font)
        self.table_manager = TableOperationManager(self.batch_manager, pacing, self.config.bold_table_header)
        self.dry_run_plans: list[ChunkPlan] = []

    async def run(self, markdown: str, base_dir: str | None = None) -> InsertResult:
        """
        Insert markdown at the end of the document.

        Args:
            markdown: Markdown source text.
            base_dir: Fallback directory for relative image paths when the
                      config does not set image_base_dir.

        Returns:
            InsertResult with chunk/image counts and the final end index.
        """
        config = self.config
        result = InsertResult(document_id=self.document_id, dry_run=config.dry_run)

        preprocessed = preprocess_markdown(markdown, config.placeholder, config.diagram_language)
        result.images_found = len(preprocessed.images)
        logger.info(f"[{OPERATION_NAME}] Preprocessed: {result.images_found} images found")

        if config.insert_images and preprocessed.images and self.drive_service is None and not config.dry_run:
            raise ValidationError("insert_images requires a Drive service")

        chunks = split_into_chunks(preprocessed.text, max_bytes=config.chunk_size)
        result.chunks_processed = len(chunks)
        logger.info(f"[{OPERATION_NAME}] Split into {len(chunks)} chunks")

        if config.dry_run:
            self.dry_run_plans = await self.plan_chunks(chunks)
            result.end_index = await self.batch_manager.get_end_index()
            return result

        if config.clear_after is not None:
            await self.clear_after(config.clear_after)

        for idx, chunk in enumerate(chunks, start=1):
            if not await self.insert_chunk(chunk, idx, len(chunks)):
                result.chunks_failed += 1

        if config.insert_images and preprocessed.images:
            image_dir = config.image_base_dir or base_dir or os.getcwd()
            logger.info(f"[{OPERATION_NAME}] Inserting {len(preprocessed.images)} images...")
            image_manager = ImageOperationManager(
                self.batch_manager,
                self.drive_service,
                config.pacing,
                config.placeholder,
                config.image_width_pt,
                config.image_height_pt,
            )
            try:
                image_result = await image_manager.insert_images(
                    preprocessed.images, image_dir, preprocessed.placeholder_count
                )
            except IMAGE_ERRORS as e:
                logger.error(f"[{OPERATION_NAME}] Image pass failed, placeholders left in place: {e}")
                result.images_failed = len(preprocessed.images)
            else:
                result.images_inserted = image_result.inserted
                result.images_failed = image_result.failed

        result.end_index = await self.batch_manager.get_end_index()
        logger.info(
            f"[{OPERATION_NAME}] Finished: {result.chunks_processed} chunks, "
            f"{result.chunks_failed} failed, end index {result.end_index}"
        )
        return result

    async def clear_after(self, clear_after: int) -> None:
        """Delete everything from clear_after to the end of the document."""
        end_index = await self.batch_manager.get_end_index()
        if end_index <= clear_after:
            logger.debug(f"[clear_after] Nothing to clear (end index {end_index} <= {clear_after})")
            return

        logger.info(f"[clear_after] Clearing content from index {clear_after} to {end_index}...")
        await self.batch_manager.execute([create_delete_range_request(clear_after, end_index)])
        await asyncio.sleep(self.config.pacing.clear)

    async def insert_chunk(self, chunk: str, idx: int, total: int) -> bool:
        """
        Parse and write one chunk.

        Returns:
            True if the chunk was written completely, False if it failed.
        """
        pacing = self.config.pacing
        blocks = parse_markdown(chunk)
        counts = count_blocks(blocks)
        logger.info(
            f"Chunk {idx}/{total} ({counts['blocks']} blocks, {counts['tables']} tables, {counts['code']} code)"
        )

        try:
            await self._write_blocks(blocks)
        except RateLimitError as e:
            logger.warning(f"  QUOTA ERROR in chunk {idx}: {e}. Backing off {pacing.quota_backoff}s")
            await asyncio.sleep(pacing.quota_backoff)
            return False
        except CHUNK_ERRORS as e:
            logger.error(f"  ERROR in chunk {idx}: {e}", exc_info=True)
            await asyncio.sleep(pacing.error_recovery)
            return False

        logger.info("  Done.")
        await asyncio.sleep(pacing.chunk_gap)
        return True

    async def _write_blocks(self, blocks: list) -> None:
        previous_was_segment = False
        for item in iter_segments(blocks):
            if isinstance(item, Table):
                if previous_was_segment:
                    await asyncio.sleep(self.config.pacing.segment_gap)
                logger.info(f"  [TABLE {item.num_rows}r]")
                await self.table_manager.insert_table(item)
                previous_was_segment = False
            else:
                await self.segment_manager.insert_segment(item)
                previous_was_segment = True

    async def plan_chunks(self, chunks: list[str]) -> list[ChunkPlan]:
        """
        Compile every chunk's segments without writing anything.

        Segments are planned against the live end index (or clear_after when
        that is lower, as the real run clears first) advanced by the
        length of each earlier segment. Table sizes are unknown until they
        exist, so offsets planned after a table are provisional.
        """
        cursor = await self.batch_manager.get_end_index()
        if self.config.clear_after is not None:
            cursor = min(cursor, self.config.clear_after)
        plans: list[ChunkPlan] = []

        for idx, chunk in enumerate(chunks, start=1):
            chunk_plan = ChunkPlan(index=idx)
            for item in iter_segments(parse_markdown(chunk)):
                if isinstance(item, Table):
                    chunk_plan.tables.append(item)
                    continue
                segment_plan = plan_segment(item, cursor, self.config.code_font)
                if segment_plan is not None:
                    chunk_plan.segments.append(segment_plan)
                    cursor += segment_plan.length
            logger.info(
                f"[dry_run] Chunk {idx}/{len(chunks)}: {len(chunk_plan.segments)} segment(s), "
                f"{len(chunk_plan.tables)} table(s), {chunk_plan.request_count} request(s)"
            )
            plans.append(chunk_plan)

        return plans


async def insert_markdown_to_doc(
    docs_service: Any,
    document_id: str,
    markdown: str,
    config: InsertConfig | None = None,
    drive_service: Any = None,
    base_dir: str | None = None,
) -> InsertResult:
    """Convenience wrapper: build a MarkdownInserter and run it once."""
    inserter = MarkdownInserter(docs_service, document_id, config=config, drive_service=drive_service)
    return await inserter.run(markdown, base_dir=base_dir)
