"""
voucherdesk/services/voucher_service.py

Purpose: Voucher lifecycle across Drive, Sheets and MongoDB

- Submit: workspace -> number -> PDF -> Drive upload -> sheet append -> record
- Edit: record lookup -> row lookup -> PDF -> Drive upload -> overwrite sheet row
  -> record -> delete old Drive file
- Delete: record lookup -> Drive delete -> clear sheet row -> record delete

Writes are sequential and best-effort. A failure aborts the remaining steps
and earlier effects stay in place; the order (document, sheet, record) means
a partial run leaves external artifacts without a record, never a record
pointing at a missing artifact.
"""

from typing import Any, Awaitable, Dict, List, Optional

from pymongo.errors import PyMongoError

from voucherdesk.core.exceptions import (
    AuthenticationError,
    InvalidCategoryError,
    RowNotFoundError,
    UpstreamWriteError,
    ValidationError,
    VoucherNotFoundError,
)
from voucherdesk.core.logging import get_logger, LogContext
from voucherdesk.schemas.voucher import VoucherInput
from voucherdesk.services import (
    drive_service,
    numbering_service,
    pdf_renderer,
    provisioning_service,
    sheets_service,
    voucher_repository,
)
from voucherdesk.services.google_client import GoogleWorkspaceError
from voucherdesk.utils.constants import (
    COMPANIES,
    MSG_DELETED,
    MSG_SUBMITTED,
    MSG_UPDATED,
    SHEET_URL_TEMPLATE,
)
from voucherdesk.utils.sheet_utils import (
    append_range,
    build_voucher_row,
    data_range,
    find_voucher_row,
    row_range,
)
from voucherdesk.utils.validation_utils import is_valid_company

logger = get_logger(__name__)


def ensure_valid_company(company: Optional[str]) -> str:
    """
    Rejects companies outside the registry.

    Raises:
        InvalidCategoryError: If the company is unknown
    """
    if not is_valid_company(company):
        raise InvalidCategoryError(
            "Invalid filter option",
            details={"company": company, "allowed": list(COMPANIES)}
        )
    return company


def sheet_url(spreadsheet_id: str) -> str:
    return SHEET_URL_TEMPLATE.format(spreadsheet_id=spreadsheet_id)


def _require_token(access_token: Optional[str]) -> str:
    if not access_token:
        raise AuthenticationError("Google access token missing. Please sign in again.")
    return access_token


async def _step(action: str, awaitable: Awaitable) -> Any:
    """
    Awaits one external write, converting its failure into UpstreamWriteError.
    """
    try:
        return await awaitable
    except GoogleWorkspaceError as e:
        logger.error(f"Failed to {action}: {e.message}")
        raise UpstreamWriteError(f"Failed to {action}: {e.message}", details={"step": action}) from e
    except PyMongoError as e:
        logger.error(f"Failed to {action}: {e}")
        raise UpstreamWriteError(f"Failed to {action}: {e}", details={"step": action}) from e


async def _delete_pdf(drive, file_id: str, action: str) -> None:
    """
    Deletes a Drive file; one that is already gone counts as deleted.
    """
    try:
        await drive.delete_file(file_id)
    except GoogleWorkspaceError as e:
        if e.status == 404:
            logger.warning(f"PDF {file_id} already missing from Drive")
            return
        logger.error(f"Failed to {action}: {e.message}")
        raise UpstreamWriteError(f"Failed to {action}: {e.message}", details={"step": action}) from e
    logger.info(f"Deleted PDF: {file_id}")


async def get_next_number(email: str, company: str) -> int:
    """Preview of the number the next submission for `company` will get."""
    ensure_valid_company(company)
    return await numbering_service.next_number(email, company)


async def list_vouchers(
    email: str,
    company: Optional[str] = None,
    date: Optional[str] = None,
    sort: Optional[str] = None,
) -> List[Dict[str, Any]]:
    return await voucher_repository.list_vouchers(email, company=company, date=date, sort=sort)


async def submit_voucher(email: str, access_token: Optional[str], voucher: VoucherInput) -> Dict[str, Any]:
    """
    Creates a voucher in all three stores.

    Args:
        email: Owner identity
        access_token: Google token used for Sheets/Drive
        voucher: Submitted fields

    Returns:
        Dict with message, voucher_no, sheet_url, pdf_link, pdf_file_id

    Raises:
        InvalidCategoryError, ProvisioningError, RenderError, UpstreamWriteError
    """
    company = ensure_valid_company(voucher.company)
    token = _require_token(access_token)

    with LogContext(user_id=email, company=company):
        sheets = sheets_service.get_sheets_client(token)
        drive = drive_service.get_drive_client(token)

        workspace = await provisioning_service.ensure_workspace(email, company, sheets, drive)
        voucher_no = await _step(
            "allocate voucher number",
            numbering_service.allocate_number(email, company),
        )
        fields = voucher.to_fields()

        pdf_path = await pdf_renderer.render_to_file(company, voucher_no, fields)
        try:
            name = pdf_renderer.pdf_file_name(company, voucher_no)
            logger.info(f"Uploading PDF {name} to Drive folder {workspace.folder_id}")
            uploaded = await _step(
                "upload PDF",
                drive.upload_pdf(name, workspace.folder_id, pdf_path),
            )

            row = build_voucher_row(voucher_no, company, fields, uploaded.web_view_link)
            await _step(
                "append to sheet",
                sheets.append_rows(workspace.spreadsheet_id, append_range(company), [row]),
            )
            logger.info(f"Data appended to {workspace.spreadsheet_id}")

            document = voucher_repository.build_voucher_document(
                email,
                company,
                voucher_no,
                fields,
                pdf_link=uploaded.web_view_link,
                pdf_file_id=uploaded.file_id,
                spreadsheet_id=workspace.spreadsheet_id,
                folder_id=workspace.folder_id,
            )
            await _step("save voucher", voucher_repository.insert_voucher(document))
        finally:
            pdf_renderer.remove_render_file(pdf_path)

        return {
            "message": MSG_SUBMITTED,
            "voucher_no": voucher_no,
            "sheet_url": sheet_url(workspace.spreadsheet_id),
            "pdf_link": uploaded.web_view_link,
            "pdf_file_id": uploaded.file_id,
        }


async def edit_voucher(
    record_id: str,
    email: str,
    access_token: Optional[str],
    voucher: VoucherInput,
) -> Dict[str, Any]:
    """
    Replaces a voucher's fields, regenerating its PDF and sheet row.

    Raises:
        InvalidCategoryError: Unknown company
        VoucherNotFoundError: No voucher with this id for the caller
        ValidationError: Company differs from the stored voucher
        RowNotFoundError: The voucher's row is missing from the sheet
        RenderError, UpstreamWriteError
    """
    company = ensure_valid_company(voucher.company)

    existing = await voucher_repository.get_voucher_by_id(record_id, email)
    if not existing:
        raise VoucherNotFoundError()

    if existing["company"] != company:
        raise ValidationError(
            "Company of an existing voucher cannot be changed",
            details={"stored": existing["company"], "requested": company}
        )

    token = _require_token(access_token)
    voucher_no = existing["voucher_no"]
    spreadsheet_id = existing["spreadsheet_id"]
    folder_id = existing["folder_id"]

    with LogContext(user_id=email, company=company, voucher_no=voucher_no):
        sheets = sheets_service.get_sheets_client(token)
        drive = drive_service.get_drive_client(token)
        fields = voucher.to_fields()

        rows = await _step("read sheet", sheets.read_range(spreadsheet_id, data_range(company)))
        row_number = find_voucher_row(rows, voucher_no)
        if row_number is None:
            logger.error(f"Voucher {voucher_no} not found in sheet {spreadsheet_id}")
            raise RowNotFoundError(
                details={"voucher_no": voucher_no, "spreadsheet_id": spreadsheet_id}
            )

        pdf_path = await pdf_renderer.render_to_file(company, voucher_no, fields)
        try:
            name = pdf_renderer.pdf_file_name(company, voucher_no)
            logger.info(f"Uploading updated PDF {name} to Drive folder {folder_id}")
            uploaded = await _step("upload PDF", drive.upload_pdf(name, folder_id, pdf_path))

            target = row_range(company, row_number)
            row = build_voucher_row(voucher_no, company, fields, uploaded.web_view_link)
            logger.info(f"Updating data in sheet {spreadsheet_id} at {target}")
            await _step("update sheet", sheets.write_range(spreadsheet_id, target, [row]))

            await _step(
                "update voucher",
                voucher_repository.update_voucher(
                    record_id,
                    email,
                    fields,
                    pdf_link=uploaded.web_view_link,
                    pdf_file_id=uploaded.file_id,
                ),
            )
            logger.info(f"Voucher updated in MongoDB: {voucher_no}")

            # old file removed only once the record points at the new one
            old_file_id = existing.get("pdf_file_id")
            if old_file_id and old_file_id != uploaded.file_id:
                await _delete_pdf(drive, old_file_id, "delete old PDF")
        finally:
            pdf_renderer.remove_render_file(pdf_path)

        return {
            "message": MSG_UPDATED,
            "voucher_no": voucher_no,
            "sheet_url": sheet_url(spreadsheet_id),
            "pdf_link": uploaded.web_view_link,
            "pdf_file_id": uploaded.file_id,
        }


async def delete_voucher(
    voucher_no: int,
    email: str,
    access_token: Optional[str],
    company: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Removes a voucher's PDF, sheet row contents and record.

    A sheet row that cannot be found is skipped; the record is still deleted.

    Raises:
        InvalidCategoryError: A company filter outside the registry
        VoucherNotFoundError: No such voucher for the caller
        UpstreamWriteError: A Drive, Sheets or database call failed
    """
    if company is not None:
        ensure_valid_company(company)

    existing = await voucher_repository.get_voucher_by_number(voucher_no, email, company)
    if not existing:
        raise VoucherNotFoundError()

    token = _require_token(access_token)
    sheet_title = existing["company"]
    spreadsheet_id = existing["spreadsheet_id"]

    with LogContext(user_id=email, company=sheet_title, voucher_no=voucher_no):
        sheets = sheets_service.get_sheets_client(token)
        drive = drive_service.get_drive_client(token)

        pdf_file_id = existing.get("pdf_file_id")
        if pdf_file_id:
            await _delete_pdf(drive, pdf_file_id, "delete PDF")

        rows = await _step("read sheet", sheets.read_range(spreadsheet_id, data_range(sheet_title)))
        row_number = find_voucher_row(rows, voucher_no)
        if row_number is not None:
            target = row_range(sheet_title, row_number)
            await _step("clear sheet row", sheets.clear_range(spreadsheet_id, target))
            logger.info(f"Deleted row from sheet {spreadsheet_id} at {target}")
        else:
            logger.warning(f"Voucher {voucher_no} not found in sheet {spreadsheet_id}; row left untouched")

        await _step("delete voucher", voucher_repository.delete_voucher(existing["_id"], email))
        logger.info(f"Deleted voucher from MongoDB: {voucher_no}")

    return {"message": MSG_DELETED}
