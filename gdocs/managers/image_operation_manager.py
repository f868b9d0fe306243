"""
Image Operation Manager

Replaces placeholder paragraphs with inline images once all text and tables
are in the document.

Pairing: the preprocessor gave every image the ordinal of its placeholder
among all placeholders it emitted (diagrams included). Placeholders found in
the live document are matched to images by that ordinal, so a diagram or a
missing image file never shifts a later image into the wrong slot.

Replacement runs from the last placeholder to the first: each replacement
changes the length of the document after it, but never before it.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any

from core.config import Pacing
from core.errors import DocInsertError
from core.utils import TransientNetworkError
from gdocs.docs_helpers import create_delete_range_request, create_insert_image_request
from gdocs.docs_structure import ParagraphLocation, find_placeholder_paragraphs
from gdocs.managers.batch_operation_manager import BatchOperationManager
from gdocs.preprocessing import ImageRef
from gdrive.files import upload_and_share

logger = logging.getLogger(__name__)

# Failures that cost one image but never the run
IMAGE_ERRORS = (DocInsertError, TransientNetworkError, OSError)


@dataclass
class ImagePassResult:
    placeholders_found: int = 0
    uploaded: int = 0
    inserted: int = 0
    missing: int = 0
    failed: int = 0


def resolve_image_path(base_dir: str, image_path: str) -> str:
    """Resolve an image path from the markdown against the image base directory."""
    return os.path.normpath(os.path.join(base_dir, os.path.expanduser(image_path)))


def select_placeholders(matches: list[ParagraphLocation], expected: int) -> list[ParagraphLocation]:
    """
    Keep the placeholders this run inserted.

    New content is always appended, so when the document holds more
    placeholders than were emitted (e.g. from an earlier run above the
    template boundary) the run's own are the last ones. When there are fewer,
    which one went missing is unknown, so none are used.
    """
    if expected and len(matches) > expected:
        logger.warning(
            f"Document has {len(matches)} placeholder(s) but {expected} were inserted; using the last {expected}"
        )
        return matches[-expected:]
    if len(matches) < expected:
        logger.warning(
            f"Only {len(matches)} of {expected} placeholder(s) found in the document; skipping image insertion"
        )
        return []
    return matches


class ImageOperationManager:
    def __init__(
        self,
        batch_manager: BatchOperationManager,
        drive_service: Any,
        pacing: Pacing,
        placeholder: str,
        width_pt: float,
        height_pt: float,
    ):
        self.batch_manager = batch_manager
        self.drive_service = drive_service
        self.pacing = pacing
        self.placeholder = placeholder
        self.width_pt = width_pt
        self.height_pt = height_pt

    async def insert_images(self, images: list[ImageRef], base_dir: str, placeholder_count: int) -> ImagePassResult:
        """
        Upload local images and swap them in for their placeholder paragraphs.

        Args:
            images: Image references from preprocessing.
            base_dir: Directory relative image paths are resolved against.
            placeholder_count: Number of placeholders preprocessing emitted.

        Returns:
            ImagePassResult with counts for the status report.
        """
        result = ImagePassResult()

        doc = await self.batch_manager.get_document()
        matches = select_placeholders(find_placeholder_paragraphs(doc, self.placeholder), placeholder_count)
        result.placeholders_found = len(matches)

        pairs: list[tuple[ParagraphLocation, str]] = []
        for image in images:
            if image.ordinal >= len(matches):
                logger.debug(f"No placeholder for image {image.path} (ordinal {image.ordinal})")
                continue

            local_path = resolve_image_path(base_dir, image.path)
            if not os.path.isfile(local_path):
                logger.debug(f"Image file not found, leaving placeholder: {local_path}")
                result.missing += 1
                continue

            try:
                url = await upload_and_share(self.drive_service, local_path)
            except IMAGE_ERRORS as e:
                logger.error(f"[insert_images] Upload failed for {local_path}: {e}")
                result.failed += 1
                continue
            result.uploaded += 1
            pairs.append((matches[image.ordinal], url))
            await asyncio.sleep(self.pacing.upload_gap)

        for location, url in sorted(pairs, key=lambda pair: pair[0].start_index, reverse=True):
            try:
                await self._replace_placeholder(location, url)
            except IMAGE_ERRORS as e:
                logger.error(f"[insert_images] Could not insert image at {location.start_index}: {e}")
                result.failed += 1
                continue
            result.inserted += 1
            await asyncio.sleep(self.pacing.image_insert)

        logger.info(
            f"[insert_images] {result.inserted}/{len(images)} image(s) inserted, "
            f"{result.missing} missing, {result.failed} failed, {result.placeholders_found} placeholder(s) found"
        )
        return result

    async def _replace_placeholder(self, location: ParagraphLocation, url: str) -> None:
        # Keep the paragraph's own newline; only its text is replaced
        requests: list[dict[str, Any]] = []
        content_end = location.end_index - 1
        if content_end > location.start_index:
            requests.append(create_delete_range_request(location.start_index, content_end))
        requests.append(create_insert_image_request(location.start_index, url, self.width_pt, self.height_pt))
        await self.batch_manager.execute(requests)
