# src/depot_allocation/pdf/styles.py
"""
Shared styling for depot PDFs
"""
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.styles import ParagraphStyle

BRAND_NAVY = "#0B3C5D"   # Header bar / table headers
BRAND_GRAY = "#A7A9AC"   # Footer rule and text
BRAND_LIGHT = "#F5F7FA"  # Table zebra

STATUS_GREEN = "#2E7D32"
STATUS_YELLOW = "#F9A825"
STATUS_RED = "#C62828"
STATUS_NEUTRAL = "#607D8B"

STATUS_COLORS = {
    "NORMAL": STATUS_GREEN,
    "WARNING": STATUS_YELLOW,
    "CRITICAL": STATUS_RED,
    "NO CAP": STATUS_NEUTRAL,
}

REPORT_TITLE = ParagraphStyle("ReportTitle", fontSize=18, leading=22, alignment=TA_CENTER, textColor=colors.HexColor(BRAND_NAVY))
SECTION_HEADER = ParagraphStyle("SectionHeader", fontSize=12, leading=16, spaceBefore=14, spaceAfter=8, textColor=colors.HexColor(BRAND_NAVY))
BODY_TEXT = ParagraphStyle("BodyText", fontSize=9, leading=12)
