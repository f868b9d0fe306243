"""
Google Docs Operation Managers

This package provides the manager classes that perform the remote writes of a
markdown insertion run, keeping request planning in `gdocs/segments.py` and
`gdocs/docs_helpers.py` free of I/O.
"""

from .batch_operation_manager import BatchOperationManager
from .image_operation_manager import ImageOperationManager, ImagePassResult
from .segment_operation_manager import SegmentOperationManager
from .table_operation_manager import TableInsertResult, TableInsertState, TableOperationManager

__all__ = [
    "BatchOperationManager",
    "ImageOperationManager",
    "ImagePassResult",
    "SegmentOperationManager",
    "TableInsertResult",
    "TableInsertState",
    "TableOperationManager",
]
