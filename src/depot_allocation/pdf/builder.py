# src/depot_allocation/pdf/builder.py

from functools import partial

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate

from depot_allocation.pdf.styles import BRAND_GRAY, BRAND_NAVY


# ============================================================
# HEADER / FOOTER
# ============================================================

def draw_header_footer(canvas, doc, report_title, report_date):
    canvas.saveState()
    width, height = doc.pagesize

    # Header bar
    canvas.setFillColor(colors.HexColor(BRAND_NAVY))
    canvas.rect(0, height - 0.9 * inch, width, 0.9 * inch, fill=1, stroke=0)

    canvas.setFont("Helvetica-Bold", 15)
    canvas.setFillColor(colors.white)
    canvas.drawString(0.5 * inch, height - 0.52 * inch, report_title)

    canvas.setFont("Helvetica", 10)
    canvas.drawRightString(width - 0.5 * inch, height - 0.52 * inch, report_date)

    # Footer rule
    canvas.setStrokeColor(colors.HexColor(BRAND_GRAY))
    canvas.line(0.5 * inch, 0.75 * inch, width - 0.5 * inch, 0.75 * inch)

    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.HexColor(BRAND_GRAY))
    canvas.drawString(0.5 * inch, 0.5 * inch, "Depot Operations | Internal Use Only")
    canvas.drawRightString(width - 0.5 * inch, 0.5 * inch, f"Page {doc.page}")

    canvas.restoreState()


# ============================================================
# PDF BUILDER
# ============================================================

def build_pdf(
    output_path: str,
    elements: list,
    report_title: str,
    report_date: str,
    pagesize=LETTER
):
    """
    Builds a branded depot PDF.
    Supports portrait or landscape pages.
    """
    doc = SimpleDocTemplate(
        output_path,
        pagesize=pagesize,
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        topMargin=1.15 * inch,
        bottomMargin=1.0 * inch,
    )

    header_footer = partial(draw_header_footer, report_title=report_title, report_date=report_date)
    doc.build(elements, onFirstPage=header_footer, onLaterPages=header_footer)
