"""
Google Drive Integration

Uploads local images to Drive so the Docs API can fetch them.
"""

from .files import guess_image_mime_type, upload_and_share

__all__ = [
    "guess_image_mime_type",
    "upload_and_share",
]
