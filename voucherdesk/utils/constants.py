"""
voucherdesk/utils/constants.py

Purpose: Centralized static values

- Company registry and logo assets
- Spreadsheet header schema
- User-facing messages

(Prevents hardcoding across the codebase)
"""

# ============================================================
# COMPANY REGISTRY
# ============================================================

COMPANIES = ("Contentstack", "Surfboard", "RawEngineering")

# Logo file name and drawn width (points) per company
COMPANY_LOGOS = {
    "Contentstack": ("contentstack.png", 150),
    "Surfboard": ("surfboard.png", 100),
    "RawEngineering": ("raw.png", 100),
}

TRANSACTION_TYPES = ("UPI", "Cash", "Account")

# ============================================================
# SPREADSHEET SCHEMA
# ============================================================

SHEET_HEADERS = [
    "Voucher No.",
    "Date",
    "Filter",
    "Pay to",
    "Account Head",
    "Towards",
    "Transaction Type",
    "The Sum",
    "Amount Rs.",
    "Checked By",
    "Approved By",
    "Receiver Signature",
    "PDF Link",
]

SHEET_ROW_COUNT = 1000
SHEET_COLUMN_COUNT = 14

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
PDF_MIME_TYPE = "application/pdf"

SHEET_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"

# ============================================================
# LISTING
# ============================================================

SORT_LOW_TO_HIGH = "lowToHigh"
SORT_HIGH_TO_LOW = "highToLow"

# ============================================================
# MESSAGES
# ============================================================

MSG_SUBMITTED = "Data submitted successfully and PDF uploaded!"
MSG_UPDATED = "Voucher updated successfully!"
MSG_DELETED = "Voucher deleted successfully!"
MSG_SESSION_ACTIVE = "Session is active"
MSG_LOGGED_OUT = "Logged out successfully"
MSG_SERVER_ACTIVE = "Server is active"
