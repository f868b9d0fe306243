"""
Batch Operation Manager

Owns every call made against the Docs API during an insertion run:
document reads and `batchUpdate` submissions. Request lists longer than the
configured slice size are split into sub-batches issued one after another,
with a throttle pause after each sub-batch big enough to risk the write quota.
"""

import asyncio
import logging
from typing import Any

from core.config import LARGE_BATCH_THRESHOLD, Pacing
from core.utils import handle_http_errors
from gdocs.docs_structure import get_end_index

logger = logging.getLogger(__name__)


class BatchOperationManager:
    """
    Sequential gateway to one Google Doc.

    Calls are awaited one at a time: the document's index space is shared
    mutable state, so requests are never fanned out in parallel.
    """

    def __init__(self, service: Any, document_id: str, pacing: Pacing, slice_size: int):
        """
        Args:
            service: Google Docs API service (`build("docs", "v1")`).
            document_id: ID of the document to edit.
            pacing: Pause configuration.
            slice_size: Maximum requests per batchUpdate call.
        """
        self.service = service
        self.document_id = document_id
        self.pacing = pacing
        self.slice_size = slice_size
        self.calls_made = 0

    @handle_http_errors("get_document", is_read_only=True)
    async def get_document(self) -> dict[str, Any]:
        return await asyncio.to_thread(self.service.documents().get(documentId=self.document_id).execute)

    async def get_end_index(self) -> int:
        """Read the live insertion point for appended content."""
        doc = await self.get_document()
        end_index = get_end_index(doc)
        logger.debug(f"[get_end_index] Doc={self.document_id}, end_index={end_index}")
        return end_index

    @handle_http_errors("batch_update")
    async def _submit(self, requests: list[dict[str, Any]]) -> dict[str, Any]:
        self.calls_made += 1
        return await asyncio.to_thread(
            self.service.documents().batchUpdate(documentId=self.document_id, body={"requests": requests}).execute
        )

    async def execute(self, requests: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Submit requests in order, sliced into sub-batches of at most slice_size.

        Returns:
            The concatenated replies of every sub-batch.
        """
        if not requests:
            return []

        replies: list[dict[str, Any]] = []
        for offset in range(0, len(requests), self.slice_size):
            batch = requests[offset : offset + self.slice_size]
            logger.debug(f"[batch_update] Doc={self.document_id}, submitting {len(batch)} request(s)")
            result = await self._submit(batch)
            replies.extend(result.get("replies", []) if result else [])
            if len(batch) > LARGE_BATCH_THRESHOLD:
                await asyncio.sleep(self.pacing.sub_batch)

        return replies
