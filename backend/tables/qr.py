"""
QR code rendering for table cards.

Single codes are rendered as SVG data URLs for the admin UI; the printable
sheet lays every table's code out on a PDF.
"""
import base64
from io import BytesIO

from reportlab.graphics import renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


def qr_drawing(payload: str, size: float = 300) -> Drawing:
    widget = QrCodeWidget(payload)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def qr_data_url(payload: str, size: float = 300) -> str:
    svg = renderSVG.drawToString(qr_drawing(payload, size))
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def qr_sheet_pdf(tables, columns: int = 3) -> bytes:
    """Render one labelled QR code per table onto letter-sized pages."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        title="Table QR codes",
    )
    styles = getSampleStyleSheet()

    cells = []
    for table in tables:
        label = f"Table {table.number}"
        if table.location:
            label = f"{label} ({table.location})"
        cells.append([qr_drawing(table.qr_code, size=1.8 * inch), Paragraph(label, styles["Normal"])])

    story = [Paragraph("Table QR codes", styles["Title"]), Spacer(1, 0.25 * inch)]

    if cells:
        rows = [cells[i:i + columns] for i in range(0, len(cells), columns)]
        rows[-1] += [""] * (columns - len(rows[-1]))
        grid = Table(rows, colWidths=[2.4 * inch] * columns)
        grid.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("BOX", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("INNERGRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 12),
                ]
            )
        )
        story.append(grid)
    else:
        story.append(Paragraph("No tables configured.", styles["Normal"]))

    doc.build(story)
    return buffer.getvalue()
