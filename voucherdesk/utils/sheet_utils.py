"""
voucherdesk/utils/sheet_utils.py

Purpose: Spreadsheet layout helpers

- A1 notation for the voucher sheet
- Row projection of a voucher in header order
- Row lookup by voucher number (linear scan)

Kept free of network calls so lookups stay unit-testable.
"""

from typing import Any, Dict, List, Optional

from voucherdesk.utils.constants import SHEET_HEADERS

# Data rows start below the header row
FIRST_DATA_ROW = 2


def col_to_a1(col_index_zero_based: int) -> str:
    """Convert 0-based column index to A1 column letters (0->A, 25->Z, 26->AA)."""

    if col_index_zero_based < 0:
        raise ValueError("col_index_zero_based must be >= 0")

    result = ""
    n = col_index_zero_based
    while True:
        n, rem = divmod(n, 26)
        result = chr(ord("A") + rem) + result
        if n == 0:
            break
        n -= 1

    return result


LAST_COLUMN = col_to_a1(len(SHEET_HEADERS) - 1)


def quote_sheet_title(title: str) -> str:
    """Quote a sheet title for use in an A1 range when needed."""
    if title.replace("_", "").isalnum():
        return title
    return "'" + title.replace("'", "''") + "'"


def header_range(sheet_title: str) -> str:
    return f"{quote_sheet_title(sheet_title)}!A1:{LAST_COLUMN}1"


def append_range(sheet_title: str) -> str:
    return f"{quote_sheet_title(sheet_title)}!A:{LAST_COLUMN}"


def data_range(sheet_title: str) -> str:
    return f"{quote_sheet_title(sheet_title)}!A{FIRST_DATA_ROW}:{LAST_COLUMN}"


def row_range(sheet_title: str, row_number: int) -> str:
    """A1 range covering a single 1-based sheet row."""
    return f"{quote_sheet_title(sheet_title)}!A{row_number}:{LAST_COLUMN}{row_number}"


def build_voucher_row(voucher_no: int, company: str, fields: Dict[str, Any], pdf_link: str) -> List[Any]:
    """
    Project a voucher onto the sheet columns, in SHEET_HEADERS order.
    """
    return [
        voucher_no,
        fields.get("date") or "",
        company,
        fields.get("pay_to") or "",
        fields.get("account_head") or "",
        fields.get("account") or "",
        fields.get("transaction_type") or "",
        fields.get("amount") or "",
        fields.get("amount_rs") or "",
        fields.get("checked_by") or "",
        fields.get("approved_by") or "",
        fields.get("receiver_signature") or "",
        pdf_link or "",
    ]


def find_voucher_row(rows: List[List[Any]], voucher_no: int) -> Optional[int]:
    """
    Locate the sheet row whose first cell equals the voucher number.

    Args:
        rows: Values read from the data range (header excluded)
        voucher_no: Voucher number to look for

    Returns:
        1-based sheet row number, or None if absent
    """
    needle = str(voucher_no).strip()
    for offset, row in enumerate(rows):
        if row and str(row[0]).strip() == needle:
            return offset + FIRST_DATA_ROW
    return None
