"""
Google Drive file upload for inline images.

The Docs API can only insert images it can fetch over HTTP, so local images
are uploaded to Drive and shared with "anyone with the link" first.
"""

import asyncio
import logging
import mimetypes
import os
from typing import Any

from googleapiclient.http import MediaFileUpload

from core.utils import handle_http_errors

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"
DOWNLOAD_URL_TEMPLATE = "https://drive.google.com/uc?export=download&id={file_id}"


def guess_image_mime_type(path: str) -> str:
    mime_type, _ = mimetypes.guess_type(path)
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return DEFAULT_IMAGE_MIME_TYPE


@handle_http_errors("upload_and_share")
async def upload_and_share(service: Any, local_path: str, file_name: str | None = None) -> str:
    """
    Upload a local file to Drive, make it publicly readable and return a download URL.

    Args:
        service: Google Drive API service (`build("drive", "v3")`).
        local_path: Path of the file to upload.
        file_name: Name for the Drive file. Defaults to the file's basename.

    Returns:
        str: A stable download URL the Docs API can fetch.
    """
    file_name = file_name or os.path.basename(local_path)
    mime_type = guess_image_mime_type(local_path)
    logger.info(f"[upload_and_share] Uploading {local_path} as '{file_name}' ({mime_type})")

    media = MediaFileUpload(local_path, mimetype=mime_type)
    created_file = await asyncio.to_thread(
        service.files().create(body={"name": file_name}, media_body=media, fields="id").execute
    )
    file_id = created_file["id"]

    await asyncio.to_thread(
        service.permissions()
        .create(fileId=file_id, body={"type": "anyone", "role": "reader"}, fields="id")
        .execute
    )

    url = DOWNLOAD_URL_TEMPLATE.format(file_id=file_id)
    logger.debug(f"[upload_and_share] Shared {file_name} as {url}")
    return url
