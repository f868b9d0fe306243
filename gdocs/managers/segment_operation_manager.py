"""
Segment Operation Manager

Writes one text segment: a single bulk insertText at the live end of the
document, a settle pause, then one formatting batch.
"""

import asyncio
import logging

from core.config import Pacing
from gdocs.managers.batch_operation_manager import BatchOperationManager
from gdocs.markdown_parser import Block
from gdocs.segments import SegmentPlan, plan_segment, renders_content

logger = logging.getLogger(__name__)


class SegmentOperationManager:
    def __init__(self, batch_manager: BatchOperationManager, pacing: Pacing, code_font: str):
        self.batch_manager = batch_manager
        self.pacing = pacing
        self.code_font = code_font

    async def insert_segment(self, blocks: list[Block]) -> SegmentPlan | None:
        """
        Append a segment at the current end of the document.

        The end index is re-read here rather than carried over from an earlier
        write, since a table insertion or an outside edit may have moved it.

        Returns:
            The executed plan, or None if the segment rendered nothing.
        """
        if not renders_content(blocks):
            logger.debug("[insert_segment] Skipping segment with only blank lines")
            return None

        insert_at = await self.batch_manager.get_end_index()
        plan = plan_segment(blocks, insert_at, self.code_font)
        if plan is None:
            return None

        logger.debug(f"[insert_segment] Inserting {plan.length} chars at index {insert_at}")
        await self.batch_manager.execute(plan.insert_requests)
        await asyncio.sleep(self.pacing.settle)

        if plan.style_requests:
            logger.debug(f"[insert_segment] Applying {len(plan.style_requests)} style update(s)")
            await self.batch_manager.execute(plan.style_requests)
        await asyncio.sleep(self.pacing.settle)

        return plan
