# modules/reports/pdf.py
import os
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

FONT_PATH = os.path.join("static", "fonts", "DejaVuSans.ttf")

# (header, width, row key)
COLUMNS = [
    ("Order #", 90, "orderNumber"),
    ("Product Name", 140, "productName"),
    ("Qty", 70, "quantity"),
    ("Done", 60, "completedQty"),
    ("Status", 80, "orderStatus"),
    ("Priority", 80, "priority"),
    ("Due Date", 90, "dueDate"),
]
CENTERED = {"quantity", "completedQty"}

MARGIN = 50
ROW_HEIGHT = 20
HEADER_FONT_SIZE = 8
CELL_FONT_SIZE = 7
CELL_PADDING = 12        # left + right padding of a table cell
PRODUCT_NAME_CHARS = 25


def _font():
    if os.path.exists(FONT_PATH):
        if "DejaVuSans" not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont("DejaVuSans", FONT_PATH))
        return "DejaVuSans"
    return "Helvetica"


def _clip(text, width, font, size):
    text = str(text)
    if pdfmetrics.stringWidth(text, font, size) <= width:
        return text
    while text and pdfmetrics.stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


def summary_line(summary):
    return (
        f"Total Orders: {summary['totalOrders']}    "
        f"Total Products: {summary['totalRows']}    "
        f"Total Quantity: {summary['totalQuantity']} pcs    "
        f"Total Completed: {summary['totalCompleted']} pcs"
    )


def table_data(rows, font):
    """Header row plus one row per report row, every cell cut to its column width."""
    data = [[title for title, _, _ in COLUMNS]]
    for row in rows:
        cells = []
        for _, width, key in COLUMNS:
            value = row.get(key, "")
            if key == "productName":
                value = str(value)[:PRODUCT_NAME_CHARS]
            cells.append(_clip(value, width - CELL_PADDING, font, CELL_FONT_SIZE))
        data.append(cells)
    return data


def _table_style(font):
    style = [
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('FONTNAME', (0, 0), (-1, -1), font),
        ('FONTSIZE', (0, 0), (-1, 0), HEADER_FONT_SIZE),
        ('FONTSIZE', (0, 1), (-1, -1), CELL_FONT_SIZE),
        ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]
    for idx, (_, _, key) in enumerate(COLUMNS):
        if key in CENTERED:
            style.append(('ALIGN', (idx, 1), (idx, -1), 'CENTER'))
    return TableStyle(style)


def render_orders_report(report, generated_at, title="Orders Report"):
    """
    Landscape A4 PDF: title, generation time, summary, active filters and
    the flattened rows. The table header repeats on every page.
    Returns the document bytes.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=MARGIN, rightMargin=MARGIN, topMargin=40, bottomMargin=40,
        title="Orders Report",
    )
    font = _font()
    styles = getSampleStyleSheet()
    for name in ("Normal", "Title", "Heading2"):
        styles[name].fontName = font
    stamp = generated_at.strftime("%Y-%m-%d %H:%M:%S")

    elements = [
        Paragraph(escape(title), styles["Title"]),
        Paragraph(f"Generated: {stamp}", styles["Normal"]),
        Spacer(1, 12),
        Paragraph("ORDERS REPORT SUMMARY", styles["Heading2"]),
        Paragraph(escape(summary_line(report["summary"])), styles["Normal"]),
        Paragraph(escape(report["filterText"]), styles["Normal"]),
        Spacer(1, 12),
    ]

    data = table_data(report["rows"], font)
    table = Table(
        data,
        colWidths=[width for _, width, _ in COLUMNS],
        rowHeights=[ROW_HEIGHT] * len(data),
        repeatRows=1,
    )
    table.setStyle(_table_style(font))
    elements.append(table)

    elements.append(Spacer(1, 12))
    elements.append(Paragraph(
        f"Report contains {len(report['rows'])} records | Generated on {stamp}",
        styles["Normal"],
    ))

    doc.build(elements)
    return buffer.getvalue()
