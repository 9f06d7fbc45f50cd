# goldsmith/services/pdf_service.py

import io
import logging
import os
import re
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain.models import AdminReceipt, Client
from services.calculation_service import summarize_balance
from utils.formatting import format_long_date, format_number, format_short_date

load_dotenv()
LOGO_PATH = os.getenv("RECEIPT_LOGO_PATH", "logo.jpg")

logger = logging.getLogger(__name__)

GOLD = HexColor("#CC9900")

GIVEN_HEADER = ["S.NO", "Product Name", "Pure(wt)", "Pure%", "Melting", "Total", "Date"]
GIVEN_COL_WIDTHS = [12 * mm, 35 * mm, 22 * mm, 20 * mm, 20 * mm, 22 * mm, 22 * mm]

RECEIVED_HEADER = [
    "S.NO",
    "Product Name",
    "Date",
    "Final Ornament(wt)",
    "Stone Weight",
    "Touch",
    "MC",
    "Subtotal",
    "Total",
]
RECEIVED_COL_WIDTHS = [12 * mm, 20 * mm, 18 * mm, 20 * mm, 17 * mm, 15 * mm, 15 * mm, 17 * mm, 19 * mm]


# ---------------------------------------------------------------------------
# Table rows
# ---------------------------------------------------------------------------

def given_rows(receipt: AdminReceipt) -> List[List[str]]:
    if receipt.given is None:
        return []

    return [
        [
            str(idx),
            item.product_name or "-",
            format_number(item.pure_weight),
            format_number(item.pure_percent),
            format_number(item.melting),
            format_number(item.total),
            format_short_date(item.date),
        ]
        for idx, item in enumerate(receipt.given.items.values(), start=1)
    ]


def received_rows(receipt: AdminReceipt) -> List[List[str]]:
    """
    Touch is the making charge percent; MC is what the making charge adds,
    total - subtotal.
    """
    if receipt.received is None:
        return []

    return [
        [
            str(idx),
            item.product_name or "-",
            format_short_date(item.date),
            format_number(item.final_ornaments_wt),
            format_number(item.stone_weight),
            format_number(item.making_charge_percent, 2),
            format_number(item.total - item.sub_total),
            format_number(item.sub_total),
            format_number(item.total),
        ]
        for idx, item in enumerate(receipt.received.items.values(), start=1)
    ]


def identity_lines(receipt: AdminReceipt, client: Optional[Client]) -> List[Tuple[str, str]]:
    name = (client.name if client else "") or receipt.client_name or "-"
    shop = (client.shop_name if client else "") or "-"
    phone = (client.phone_number if client else "") or "-"
    return [("Name", name), ("Shop", shop), ("Phone Number", phone)]


def balance_lines(receipt: AdminReceipt, client: Optional[Client]) -> List[Tuple[str, str]]:
    summary = summarize_balance(receipt, client)
    return [
        ("OD Balance", format_number(summary.opening_balance)),
        ("Current Balance", format_number(summary.current_balance)),
        ("New Balance", format_number(summary.new_balance)),
    ]


def receipt_pdf_filename(receipt: AdminReceipt, client: Optional[Client]) -> str:
    name = (client.name if client else "") or receipt.client_name
    safe = re.sub(r"[^a-zA-Z0-9]", "_", name) if name else "unknown"
    return f"receipt_{safe}.pdf"


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def _draw_border(canvas, doc) -> None:
    canvas.saveState()
    canvas.setStrokeColor(GOLD)
    canvas.setLineWidth(1)
    width, height = A4
    canvas.rect(5 * mm, 5 * mm, width - 10 * mm, height - 10 * mm)
    canvas.restoreState()


def _items_table(header: List[str], rows: List[List[str]], col_widths) -> Table:
    table = Table([header] + rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("GRID", (0, 0), (-1, -1), 0.1 * mm, colors.black),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("TOPPADDING", (0, 0), (-1, -1), 2 * mm),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2 * mm),
            ]
        )
    )
    return table


def _label_table(lines: List[Tuple[str, str]], label_width: float, align: str = "LEFT") -> Table:
    table = Table([[label, f": {value}"] for label, value in lines], colWidths=[label_width, 50 * mm], hAlign=align)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 11),
            ]
        )
    )
    return table


def _logo() -> Optional[Image]:
    if not LOGO_PATH or not os.path.exists(LOGO_PATH):
        logger.warning("Logo not found at %s, continuing without logo", LOGO_PATH)
        return None
    return Image(LOGO_PATH, width=40 * mm, height=20 * mm)


def build_receipt_story(receipt: AdminReceipt, client: Optional[Client]) -> list:
    styles = getSampleStyleSheet()
    story = []

    logo = _logo()
    if logo is not None:
        story.append(logo)
    story.append(Spacer(1, 6 * mm))

    story.append(_label_table(identity_lines(receipt, client), label_width=35 * mm))
    story.append(Spacer(1, 8 * mm))

    given_date = format_long_date(receipt.given.date if receipt.given else None)
    story.append(Paragraph(f"<b>Given Date :</b> {given_date}", styles["Normal"]))
    story.append(Spacer(1, 2 * mm))
    story.append(_items_table(GIVEN_HEADER, given_rows(receipt), GIVEN_COL_WIDTHS))
    story.append(Spacer(1, 8 * mm))

    received_date = format_long_date(receipt.received.date if receipt.received else None)
    story.append(Paragraph(f"<b>Received Date :</b> {received_date}", styles["Normal"]))
    story.append(Spacer(1, 2 * mm))
    story.append(_items_table(RECEIVED_HEADER, received_rows(receipt), RECEIVED_COL_WIDTHS))
    story.append(Spacer(1, 12 * mm))

    story.append(_label_table(balance_lines(receipt, client), label_width=35 * mm, align="RIGHT"))

    return story


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_receipt_pdf(receipt: AdminReceipt, client: Optional[Client]) -> bytes:
    """
    Render a stored receipt to an A4 PDF and return its bytes.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=10 * mm,
        bottomMargin=15 * mm,
        title=f"Receipt {receipt.voucher_id}".strip(),
    )
    doc.build(
        build_receipt_story(receipt, client),
        onFirstPage=_draw_border,
        onLaterPages=_draw_border,
    )
    return buffer.getvalue()
