"""
Google Workspace OAuth Scopes

Scopes needed to append content to a Google Doc and, for the image pass,
to upload and share images on Google Drive.
"""

# Google Docs scopes
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

# Google Drive scopes
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

# Text and tables only need the Docs API
INSERT_SCOPES = [DOCS_WRITE_SCOPE]

# drive.file is enough to create image files and share them
IMAGE_SCOPES = [DOCS_WRITE_SCOPE, DRIVE_FILE_SCOPE]


def get_required_scopes(insert_images: bool = False) -> list[str]:
    """Return the OAuth scopes a run needs."""
    return list(IMAGE_SCOPES if insert_images else INSERT_SCOPES)
