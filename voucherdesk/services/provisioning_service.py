"""
voucherdesk/services/provisioning_service.py

Purpose: Per-(email, company) workspace provisioning

- Reuses the spreadsheet and folder recorded on any earlier voucher
- Otherwise creates "<company> Vouchers" spreadsheet (with header row) and folder

The two creations are independent calls; a folder failure leaves the new
spreadsheet in place.
"""

from dataclasses import dataclass
from typing import Optional

from voucherdesk.core.exceptions import ProvisioningError
from voucherdesk.core.logging import get_logger, LogContext
from voucherdesk.services import voucher_repository
from voucherdesk.services.drive_service import DriveClient
from voucherdesk.services.google_client import GoogleWorkspaceError
from voucherdesk.services.sheets_service import SheetsClient
from voucherdesk.utils.constants import (
    SHEET_COLUMN_COUNT,
    SHEET_HEADERS,
    SHEET_ROW_COUNT,
)
from voucherdesk.utils.sheet_utils import header_range

logger = get_logger(__name__)


@dataclass(frozen=True)
class Workspace:
    spreadsheet_id: str
    folder_id: str
    created: bool = False


def workspace_title(company: str) -> str:
    return f"{company} Vouchers"


async def find_workspace(email: str, company: str) -> Optional[Workspace]:
    existing = await voucher_repository.find_any_voucher(email, company)
    if not existing:
        return None
    return Workspace(
        spreadsheet_id=existing["spreadsheet_id"],
        folder_id=existing["folder_id"],
    )


async def ensure_workspace(
    email: str,
    company: str,
    sheets: SheetsClient,
    drive: DriveClient,
) -> Workspace:
    """
    Returns the workspace of (email, company), creating it on first use.

    Raises:
        ProvisioningError: If the spreadsheet or folder cannot be created
    """
    with LogContext(user_id=email, company=company):
        workspace = await find_workspace(email, company)
        if workspace:
            logger.debug(f"Reusing workspace {workspace.spreadsheet_id}")
            return workspace

        title = workspace_title(company)
        logger.info(f"Creating new workspace for {company}")

        try:
            spreadsheet_id = await sheets.create_spreadsheet(
                title,
                company,
                SHEET_ROW_COUNT,
                SHEET_COLUMN_COUNT,
            )
            await sheets.write_range(spreadsheet_id, header_range(company), [SHEET_HEADERS])
            logger.info(f"Headers set for {spreadsheet_id}")
        except GoogleWorkspaceError as e:
            logger.error(f"Error creating spreadsheet for {company}: {e.message}")
            raise ProvisioningError(
                f"Failed to create spreadsheet: {e.message}",
                details={"step": "create_spreadsheet"}
            ) from e

        try:
            folder_id = await drive.create_folder(title)
        except GoogleWorkspaceError as e:
            logger.error(
                f"Error creating Drive folder for {company}: {e.message}; "
                f"spreadsheet {spreadsheet_id} left in place"
            )
            raise ProvisioningError(
                f"Failed to create Drive folder: {e.message}",
                details={"step": "create_folder", "spreadsheet_id": spreadsheet_id}
            ) from e

        return Workspace(spreadsheet_id=spreadsheet_id, folder_id=folder_id, created=True)
