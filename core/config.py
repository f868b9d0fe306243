"""
Configuration for markdown insertion runs.

Two groups of settings live here:
- Pacing: every fixed pause the write protocol takes. Propagation waits
  (table creation) are kept apart from quota throttles so either can be tuned
  without touching the other.
- InsertConfig: the per-run options (fonts, template boundary, chunking,
  image handling).

Environment overrides follow the same os.getenv pattern as the credential
settings in auth/credentials.py.
"""

import os
from dataclasses import dataclass, field, fields

from core.errors import ValidationError

# Google Docs batchUpdate accepts at most 500 requests per call
MAX_BATCH_ITEMS = 500

# Default slice for formatting/cell batches, well under the hard ceiling
DEFAULT_BATCH_SLICE_SIZE = 150

# Sub-batches larger than this get a throttle pause after them
LARGE_BATCH_THRESHOLD = 10

DEFAULT_CHUNK_SIZE = 20_000
DEFAULT_CODE_FONT = "Consolas"
DEFAULT_PLACEHOLDER = "[Diagrama - ver imagen adjunta]"
DEFAULT_DIAGRAM_LANGUAGE = "mermaid"


@dataclass
class Pacing:
    """Fixed pauses (seconds) used by the write protocol.

    Attributes:
        settle: After each bulk text insertion and each formatting batch.
        segment_gap: After a segment flushed ahead of a table.
        table_propagation: After insertTable, before re-reading the document.
        cell_fill: After filling table cells.
        table_trailer: After the newline appended behind a table.
        chunk_gap: Between successfully inserted chunks.
        error_recovery: After a chunk fails for any reason other than quota.
        quota_backoff: After a chunk fails on the write quota.
        sub_batch: Between sub-batches larger than LARGE_BATCH_THRESHOLD.
        upload_gap: After each image upload.
        image_insert: After replacing a placeholder with an inline image.
        clear: After clearing content below the template boundary.
    """

    settle: float = 2.0
    segment_gap: float = 1.0
    table_propagation: float = 3.0
    cell_fill: float = 2.0
    table_trailer: float = 1.0
    chunk_gap: float = 3.0
    error_recovery: float = 10.0
    quota_backoff: float = 60.0
    sub_batch: float = 2.0
    upload_gap: float = 1.0
    image_insert: float = 2.0
    clear: float = 2.0

    @classmethod
    def immediate(cls) -> "Pacing":
        """A pacing with every pause set to zero (tests and dry runs)."""
        return cls(**{f.name: 0.0 for f in fields(cls)})


@dataclass
class InsertConfig:
    """Options for one insertion run."""

    code_font: str = DEFAULT_CODE_FONT
    start_index: int | None = None
    clear_after: int | None = None
    insert_images: bool = False
    image_base_dir: str | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    batch_slice_size: int = DEFAULT_BATCH_SLICE_SIZE
    bold_table_header: bool = True
    placeholder: str = DEFAULT_PLACEHOLDER
    diagram_language: str = DEFAULT_DIAGRAM_LANGUAGE
    image_width_pt: float = 440
    image_height_pt: float = 280
    dry_run: bool = False
    pacing: Pacing = field(default_factory=Pacing)

    @classmethod
    def from_env(cls, **overrides) -> "InsertConfig":
        """Build a config from DOCINSERT_* environment variables, then apply explicit overrides."""
        env_values = {}

        code_font = os.getenv("DOCINSERT_CODE_FONT")
        if code_font:
            env_values["code_font"] = code_font

        chunk_size = os.getenv("DOCINSERT_CHUNK_SIZE")
        if chunk_size:
            try:
                env_values["chunk_size"] = int(chunk_size)
            except ValueError as e:
                raise ValidationError(f"DOCINSERT_CHUNK_SIZE must be an integer, got '{chunk_size}'") from e

        placeholder = os.getenv("DOCINSERT_PLACEHOLDER")
        if placeholder:
            env_values["placeholder"] = placeholder

        env_values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**env_values)

    def validate(self) -> None:
        """Raise ValidationError for option combinations that cannot run safely."""
        if self.chunk_size < 1:
            raise ValidationError("chunk_size must be a positive integer")

        if not 1 <= self.batch_slice_size <= MAX_BATCH_ITEMS:
            raise ValidationError(f"batch_slice_size must be between 1 and {MAX_BATCH_ITEMS}")

        if not self.placeholder.strip():
            raise ValidationError("placeholder text cannot be empty")

        if self.start_index is not None and self.start_index < 1:
            raise ValidationError("start_index must be a positive integer")

        if self.clear_after is not None:
            if self.clear_after < 1:
                raise ValidationError("clear_after must be a positive integer")
            if self.start_index is not None and self.clear_after < self.start_index:
                raise ValidationError(
                    f"clear_after ({self.clear_after}) is below the template boundary "
                    f"start_index ({self.start_index}); refusing to delete template content"
                )
