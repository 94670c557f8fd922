# src/depot_allocation/pdf/capacity_report_pdf.py
"""
Depot capacity report as a one-file PDF: network KPIs, depot table, utilization chart.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import Image, Paragraph, Spacer, Table, TableStyle

from depot_allocation.capacity_reporting.capacity_models import DepotCapacityReport
from depot_allocation.pdf.builder import build_pdf
from depot_allocation.pdf.chart_builder import build_utilization_chart
from depot_allocation.pdf.styles import (
    BODY_TEXT,
    BRAND_LIGHT,
    BRAND_NAVY,
    SECTION_HEADER,
    STATUS_COLORS,
)
from depot_allocation.utils.config import config
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)


def build_depot_table(report: DepotCapacityReport) -> Table:
    data = [["Depot", "Capacity TEU", "Used TEU", "Available TEU", "Usage", "Containers", "Status"]]
    for d in report.depots:
        data.append([
            d.name,
            f"{d.capacity_teu:,.1f}",
            f"{d.used_teu:,.1f}",
            f"{d.available_teu:,.1f}",
            f"{d.usage_pct:.1f}%" if d.usage_pct is not None else "N/A",
            d.container_count,
            d.status,
        ])

    table = Table(
        data,
        colWidths=[2.0 * inch, 0.95 * inch, 0.85 * inch, 1.0 * inch, 0.7 * inch, 0.85 * inch, 0.85 * inch],
        repeatRows=1,
    )

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(BRAND_NAVY)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 8.5),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8.5),
        ("ALIGN", (1, 1), (-2, -1), "RIGHT"),
        ("ALIGN", (-1, 1), (-1, -1), "CENTER"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor(BRAND_LIGHT)]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
    ]

    # Status cell coloring
    for r, d in enumerate(report.depots, start=1):
        color = STATUS_COLORS.get(d.status)
        if color:
            style.append(("TEXTCOLOR", (-1, r), (-1, r), colors.HexColor(color)))
            style.append(("FONTNAME", (-1, r), (-1, r), "Helvetica-Bold"))

    table.setStyle(TableStyle(style))
    return table


def write_capacity_report_pdf(report: DepotCapacityReport, output_dir: Optional[Path] = None) -> Path:
    output_dir = Path(output_dir or config.OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)

    s = report.summary
    report_date = s.report_date.isoformat()
    pdf_path = output_dir / f"depot_capacity_{report_date}.pdf"

    elements = [
        Paragraph("Network Summary", SECTION_HEADER),
        Paragraph(
            f"Depots: {s.total_depots} &nbsp;&nbsp; "
            f"Capacity: {s.network_capacity_teu:,.1f} TEU &nbsp;&nbsp; "
            f"Used: {s.network_used_teu:,.1f} TEU &nbsp;&nbsp; "
            f"Available: {s.network_available_teu:,.1f} TEU &nbsp;&nbsp; "
            f"Utilization: {s.network_utilization_pct:.1f}%",
            BODY_TEXT,
        ),
        Paragraph(
            f"Critical: {s.depots_critical} &nbsp;&nbsp; Warning: {s.depots_warning} &nbsp;&nbsp; Normal: {s.depots_normal}",
            BODY_TEXT,
        ),
        Spacer(1, 0.15 * inch),
        Paragraph("Depots", SECTION_HEADER),
        build_depot_table(report),
    ]

    chart_path = build_utilization_chart(
        report.depots,
        output_dir,
        warning_pct=config.ALERT_WARNING_PCT,
        critical_pct=config.ALERT_CRITICAL_PCT,
    )
    if chart_path is not None:
        elements += [
            Spacer(1, 0.2 * inch),
            Paragraph("Utilization", SECTION_HEADER),
            Image(str(chart_path), width=7.0 * inch, height=3.6 * inch, kind="proportional"),
        ]

    build_pdf(str(pdf_path), elements, "Depot Capacity Report", report_date)
    log.info(f"Capacity PDF written: {pdf_path}")
    return pdf_path
