"""
voucherdesk/services/drive_service.py

Purpose: Google Drive integration

- Creates per-company voucher folders
- Uploads rendered voucher PDFs
- Deletes superseded or removed PDFs
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from googleapiclient.http import MediaFileUpload

from voucherdesk.core.logging import get_logger
from voucherdesk.services.google_client import build_google_service, execute
from voucherdesk.utils.constants import FOLDER_MIME_TYPE, PDF_MIME_TYPE

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    file_id: str
    web_view_link: Optional[str]


class DriveClient:
    """
    Thin async wrapper around the Drive v3 API for one user.
    """

    def __init__(self, service: Any):
        self._service = service

    async def create_folder(self, name: str) -> str:
        metadata = {"name": name, "mimeType": FOLDER_MIME_TYPE}
        request = self._service.files().create(body=metadata, fields="id")
        response = await execute(request, "create Drive folder")
        folder_id = response["id"]
        logger.info(f"Created Drive folder {folder_id} ({name})")
        return folder_id

    async def upload_pdf(self, name: str, parent_id: str, path: Path) -> UploadedFile:
        """
        Uploads a local PDF into a folder.

        Returns:
            UploadedFile with the Drive id and view link
        """
        media = MediaFileUpload(str(path), mimetype=PDF_MIME_TYPE, resumable=False)
        request = self._service.files().create(
            body={"name": name, "parents": [parent_id]},
            media_body=media,
            fields="id, webViewLink",
        )
        response = await execute(request, "upload PDF")
        uploaded = UploadedFile(
            file_id=response["id"],
            web_view_link=response.get("webViewLink"),
        )
        logger.info(f"PDF uploaded: {uploaded.file_id}, Link: {uploaded.web_view_link}")
        return uploaded

    async def delete_file(self, file_id: str) -> None:
        request = self._service.files().delete(fileId=file_id)
        await execute(request, "delete PDF")
        logger.info(f"Deleted Drive file {file_id}")


def get_drive_client(access_token: str) -> DriveClient:
    """Builds a Drive client acting as the signed-in user."""
    return DriveClient(build_google_service("drive", "v3", access_token))
