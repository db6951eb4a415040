"""
voucherdesk/services/sheets_service.py

Purpose: Google Sheets integration

- Creates per-company voucher spreadsheets
- Reads, writes, appends and clears value ranges
- RAW value input so voucher numbers are stored as entered
"""

from typing import Any, List

from voucherdesk.core.logging import get_logger
from voucherdesk.services.google_client import build_google_service, execute

logger = get_logger(__name__)


class SheetsClient:
    """
    Thin async wrapper around the Sheets v4 API for one user.
    """

    def __init__(self, service: Any):
        self._service = service

    async def create_spreadsheet(
        self,
        title: str,
        sheet_title: str,
        row_count: int,
        column_count: int,
    ) -> str:
        """
        Creates a spreadsheet with a single named sheet.

        Returns:
            The new spreadsheet id
        """
        body = {
            "properties": {"title": title},
            "sheets": [
                {
                    "properties": {
                        "title": sheet_title,
                        "gridProperties": {
                            "rowCount": row_count,
                            "columnCount": column_count,
                        },
                    }
                }
            ],
        }
        request = self._service.spreadsheets().create(body=body, fields="spreadsheetId")
        response = await execute(request, "create spreadsheet")
        spreadsheet_id = response["spreadsheetId"]
        logger.info(f"Created spreadsheet {spreadsheet_id} ({title})")
        return spreadsheet_id

    async def read_range(self, spreadsheet_id: str, a1_range: str) -> List[List[Any]]:
        request = (
            self._service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=a1_range)
        )
        response = await execute(request, "read sheet")
        rows = response.get("values", [])
        return rows if isinstance(rows, list) else []

    async def write_range(self, spreadsheet_id: str, a1_range: str, rows: List[List[Any]]) -> None:
        request = (
            self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=a1_range,
                valueInputOption="RAW",
                body={"values": rows},
            )
        )
        await execute(request, "update sheet")
        logger.debug(f"Wrote {len(rows)} row(s) to {spreadsheet_id} at {a1_range}")

    async def append_rows(self, spreadsheet_id: str, a1_range: str, rows: List[List[Any]]) -> None:
        request = (
            self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=a1_range,
                valueInputOption="RAW",
                body={"values": rows},
            )
        )
        await execute(request, "append to sheet")
        logger.debug(f"Appended {len(rows)} row(s) to {spreadsheet_id}")

    async def clear_range(self, spreadsheet_id: str, a1_range: str) -> None:
        request = (
            self._service.spreadsheets()
            .values()
            .clear(spreadsheetId=spreadsheet_id, range=a1_range, body={})
        )
        await execute(request, "clear sheet row")
        logger.debug(f"Cleared {a1_range} in {spreadsheet_id}")


def get_sheets_client(access_token: str) -> SheetsClient:
    """Builds a Sheets client acting as the signed-in user."""
    return SheetsClient(build_google_service("sheets", "v4", access_token))
