"""
Table Operation Manager

Creates and populates a table at the end of a Google Doc.

The Docs API cannot create a table with content in one call, and the layout of
a new table is not known until it has been created and read back. Insertion
therefore runs as a small state machine where every transition is gated on a
fresh read of the document:

    CREATED -> DISCOVERED -> FILLED -> HEADER_STYLED -> TERMINATED

Cell destinations come from the table's own row/cell structure rather than
from computed offsets, and fills are submitted last cell first so that no fill
shifts a cell that is still waiting for its text.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.config import Pacing
from core.errors import TableNotFoundError
from gdocs.docs_helpers import (
    create_format_text_request,
    create_insert_table_request,
    create_insert_text_request,
)
from gdocs.docs_structure import find_table_at_or_after, get_table_cell
from gdocs.managers.batch_operation_manager import BatchOperationManager
from gdocs.markdown_parser import Table

logger = logging.getLogger(__name__)


class TableInsertState(str, Enum):
    CREATED = "created"
    DISCOVERED = "discovered"
    FILLED = "filled"
    HEADER_STYLED = "header_styled"
    TERMINATED = "terminated"


@dataclass
class TableInsertResult:
    rows: int
    columns: int
    insert_at: int
    cells_filled: int = 0
    states: list[TableInsertState] = field(default_factory=list)

    @property
    def state(self) -> TableInsertState | None:
        return self.states[-1] if self.states else None

    @property
    def populated(self) -> bool:
        return TableInsertState.FILLED in self.states


def plan_cell_fills(table_element: dict[str, Any], rows: tuple[tuple[str, ...], ...]) -> list[dict[str, Any]]:
    """
    Build insertText requests that fill a freshly created (empty) table.

    Each request targets one past its cell's start index, read from the live
    table structure. Requests are returned in reverse row/column order so that
    applying them one after another never moves a cell not yet filled.
    Empty values and cells missing from either side are skipped.
    """
    requests: list[dict[str, Any]] = []
    for row_idx, row in enumerate(rows):
        for col_idx, cell_text in enumerate(row):
            clean = str(cell_text).strip()
            if not clean:
                continue
            cell = get_table_cell(table_element, row_idx, col_idx)
            if cell is None:
                logger.debug(f"No cell ({row_idx},{col_idx}) in created table; skipping value")
                continue
            requests.append(create_insert_text_request(cell["startIndex"] + 1, clean))

    requests.reverse()
    return requests


def plan_header_bold(table_element: dict[str, Any]) -> list[dict[str, Any]]:
    """Bold the text of every non-empty cell in the table's first row."""
    table_rows = table_element.get("table", {}).get("tableRows", [])
    if not table_rows:
        return []

    requests: list[dict[str, Any]] = []
    for cell in table_rows[0].get("tableCells", []):
        start_index = cell["startIndex"] + 1
        end_index = cell["endIndex"] - 1
        if end_index > start_index:
            requests.append(create_format_text_request(start_index, end_index, bold=True))
    return requests


class TableOperationManager:
    def __init__(self, batch_manager: BatchOperationManager, pacing: Pacing, bold_header: bool = True):
        self.batch_manager = batch_manager
        self.pacing = pacing
        self.bold_header = bold_header

    async def _locate_table(self, min_start_index: int) -> dict[str, Any]:
        doc = await self.batch_manager.get_document()
        table_element = find_table_at_or_after(doc, min_start_index)
        if table_element is None:
            raise TableNotFoundError(self.batch_manager.document_id, min_start_index)
        return table_element

    async def insert_table(self, table: Table) -> TableInsertResult:
        """
        Append a table at the end of the document and populate it.

        If the new table cannot be found after creation, filling is abandoned
        and the empty table is left in place; the trailing newline is still
        appended so following content starts below it.
        """
        insert_at = await self.batch_manager.get_end_index()
        result = TableInsertResult(rows=table.num_rows, columns=table.num_columns, insert_at=insert_at)

        logger.info(f"[insert_table] {result.rows}x{result.columns} table at index {insert_at}")
        await self.batch_manager.execute([create_insert_table_request(insert_at, result.rows, result.columns)])
        result.states.append(TableInsertState.CREATED)
        await asyncio.sleep(self.pacing.table_propagation)

        try:
            await self._populate(table, result)
        except TableNotFoundError as e:
            logger.warning(f"[insert_table] {e}; leaving table empty")

        after_index = await self.batch_manager.get_end_index()
        await self.batch_manager.execute([create_insert_text_request(after_index, "\n")])
        result.states.append(TableInsertState.TERMINATED)
        await asyncio.sleep(self.pacing.table_trailer)

        return result

    async def _populate(self, table: Table, result: TableInsertResult) -> None:
        table_element = await self._locate_table(result.insert_at)
        result.states.append(TableInsertState.DISCOVERED)

        live_rows = table_element.get("table", {}).get("rows")
        live_columns = table_element.get("table", {}).get("columns")
        if (live_rows, live_columns) != (result.rows, result.columns):
            logger.warning(
                f"[insert_table] Created table is {live_rows}x{live_columns}, "
                f"expected {result.rows}x{result.columns}; filling matching cells only"
            )

        fill_requests = plan_cell_fills(table_element, table.rows)
        if fill_requests:
            await self.batch_manager.execute(fill_requests)
            await asyncio.sleep(self.pacing.cell_fill)
        result.cells_filled = len(fill_requests)
        result.states.append(TableInsertState.FILLED)

        if not self.bold_header:
            return

        # Fills moved every cell boundary after the first; read them again
        table_element = await self._locate_table(result.insert_at)
        bold_requests = plan_header_bold(table_element)
        if bold_requests:
            await self.batch_manager.execute(bold_requests)
            await asyncio.sleep(self.pacing.cell_fill)
        result.states.append(TableInsertState.HEADER_STYLED)
