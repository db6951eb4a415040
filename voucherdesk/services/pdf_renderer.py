"""
voucherdesk/services/pdf_renderer.py

Purpose: Voucher PDF layout

- Header: company logo, date and voucher number
- Labeled rows drawn as label, underline, value
- Signature block with underlines sized to the signer's name

Coordinates below are measured from the top-left corner of the page and
converted to reportlab's bottom-left origin when drawing.
"""

import asyncio
import uuid
from pathlib import Path
from typing import Dict, Optional, Tuple

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from voucherdesk.core.config import settings
from voucherdesk.core.exceptions import RenderError
from voucherdesk.core.logging import get_logger
from voucherdesk.utils.constants import COMPANY_LOGOS

logger = get_logger(__name__)

W, H = LETTER

FONT = "Helvetica"
BODY_SIZE = 12
LABEL_SIZE = 10

MARGIN_X = 30
VALUE_X = 130
LINE_START_X = 120
LINE_END_X = 550

FIELD_ROWS = (
    ("Pay to:", "pay_to", 120),
    ("Account Head:", "account_head", 160),
    ("Towards:", "account", 200),
    ("Transaction Type:", "transaction_type", 240),
    ("Amount Rs.", "amount", 280),
    ("The Sum.", "amount_rs", 320),
)

SIGNATURES = (
    ("Checked By", "checked_by"),
    ("Approved By", "approved_by"),
    ("Receiver Signature", "receiver_signature"),
)
SIGNATURE_Y = 400
SIGNATURE_X = 50
SIGNATURE_SPACING = 150
SIGNATURE_MIN_WIDTH = 100


def logo_for(company: str) -> Optional[Tuple[Path, int]]:
    """
    Looks up the logo image and drawn width for a company.

    Returns:
        (path, width) or None for unknown companies and missing files
    """
    entry = COMPANY_LOGOS.get(company)
    if entry is None:
        return None

    filename, width = entry
    path = Path(settings.LOGO_DIR) / filename
    if not path.is_file():
        logger.debug(f"Logo for {company} not found at {path}")
        return None
    return path, width


def pdf_file_name(company: str, voucher_no: int) -> str:
    """Name of the PDF as stored in Drive."""
    return f"{company}_{voucher_no}.pdf"


class VoucherPDF:
    """Single-page voucher drawn on a reportlab canvas."""

    def __init__(self, filename: str):
        self.c = canvas.Canvas(filename, pagesize=LETTER)
        self.c.setLineWidth(1)

    def save(self):
        self.c.save()

    def draw_text(self, text, x, top, size=BODY_SIZE):
        # `top` is the top of the text line; reportlab draws on the baseline
        self.c.setFont(FONT, size)
        self.c.drawString(x, H - top - size, str(text or ""))

    def draw_line(self, x1, top, x2):
        self.c.line(x1, H - top, x2, H - top)

    def text_width(self, text, size=BODY_SIZE):
        return pdfmetrics.stringWidth(str(text or ""), FONT, size)

    def draw_header(self, company: str, voucher_no: int, date: str):
        self.draw_text("Date:", 400, 20)
        self.draw_text(date, 440, 20)
        self.draw_line(440, 35, LINE_END_X)

        self.draw_text("Voucher No:", 400, 40)
        self.draw_text(voucher_no, 470, 40)
        self.draw_line(470, 55, LINE_END_X)

        logo = logo_for(company)
        if logo:
            path, width = logo
            image = ImageReader(str(path))
            img_w, img_h = image.getSize()
            height = width * img_h / img_w if img_w else width
            self.c.drawImage(image, MARGIN_X, H - 30 - height, width=width, height=height, mask="auto")

    def draw_field(self, label: str, value: str, top: int):
        self.draw_text(label, MARGIN_X, top)
        self.draw_line(LINE_START_X, top + BODY_SIZE, LINE_END_X)
        self.draw_text(value, VALUE_X, top)

    def draw_signature(self, label: str, value: str, x: int, top: int):
        width = max(self.text_width(value), SIGNATURE_MIN_WIDTH) if value else SIGNATURE_MIN_WIDTH
        self.draw_text(label, x, top - 15, size=LABEL_SIZE)
        self.draw_line(x, top, x + width)
        self.draw_text(value, x, top + 5)


def render_voucher_pdf(path: Path, company: str, voucher_no: int, fields: Dict[str, str]) -> Path:
    """
    Draws a voucher into `path`.

    Args:
        path: Output file
        company: Company the voucher belongs to (selects the logo)
        voucher_no: Voucher number
        fields: Voucher fields keyed by stored name; missing values print blank

    Raises:
        RenderError: If the file cannot be written
    """
    try:
        pdf = VoucherPDF(str(path))
        pdf.draw_header(company, voucher_no, fields.get("date") or "")

        for label, key, top in FIELD_ROWS:
            pdf.draw_field(label, fields.get(key) or "", top)

        for i, (label, key) in enumerate(SIGNATURES):
            pdf.draw_signature(
                label,
                fields.get(key) or "",
                SIGNATURE_X + SIGNATURE_SPACING * i,
                SIGNATURE_Y,
            )

        pdf.save()
    except OSError as e:
        logger.error(f"Error creating PDF {path}: {e}")
        raise RenderError(f"Failed to create PDF: {e}") from e

    return path


async def render_to_file(company: str, voucher_no: int, fields: Dict[str, str]) -> Path:
    """
    Renders a voucher into a temporary file under RENDER_DIR.

    The returned path is complete and closed; callers must remove it with
    `remove_render_file` once uploaded.
    """
    render_dir = Path(settings.RENDER_DIR)
    try:
        render_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RenderError(f"Failed to prepare render directory: {e}") from e

    path = render_dir / f"{uuid.uuid4().hex}_{pdf_file_name(company, voucher_no)}"
    return await asyncio.to_thread(render_voucher_pdf, path, company, voucher_no, fields)


def remove_render_file(path: Optional[Path]):
    """Deletes a temporary render; a leftover file is logged, not raised."""
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove temporary PDF {path}: {e}")
