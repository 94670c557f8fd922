from __future__ import annotations

import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List

from depot_allocation.capacity_reporting.capacity_models import DepotCapacityReport
from depot_allocation.utils.config import config
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)


def render_capacity_alert_email(report: DepotCapacityReport) -> str:
    """
    Plain-text alert body: critical depots first, then warnings.
    """
    s = report.summary
    lines: list[str] = []
    lines.append("=" * 70)
    lines.append("DEPOT CAPACITY ALERT")
    lines.append("=" * 70)
    lines.append("")
    lines.append(f"Report Date: {s.report_date.isoformat()}")
    lines.append(f"Network Utilization: {s.network_utilization_pct:.1f}%")
    lines.append(f"Depots CRITICAL / WARNING / NORMAL: {s.depots_critical} / {s.depots_warning} / {s.depots_normal}")
    lines.append("")

    if report.critical:
        lines.append("--- CRITICAL (critically full) ---")
        for d in report.critical:
            lines.append(f"  {d.name:<20} {d.usage_pct:5.1f}%  {d.available_teu:8.1f} TEU free")
        lines.append("")

    if report.warning:
        lines.append("--- WARNING (approaching capacity) ---")
        for d in report.warning:
            lines.append(f"  {d.name:<20} {d.usage_pct:5.1f}%  {d.available_teu:8.1f} TEU free")
        lines.append("")

    if not report.has_alerts:
        lines.append("All depots operating normally.")
        lines.append("")

    lines.append("Automated • Depot Operations")
    return "\n".join(lines)


def send_capacity_alert_email(
    body_text: str,
    recipients: List[str],
    subject: str | None = None,
) -> None:
    if not recipients:
        raise ValueError("Capacity alert recipients list is empty.")

    msg = MIMEMultipart("alternative")
    msg["From"] = config.SENDER_EMAIL
    msg["To"] = ", ".join(recipients)
    msg["Subject"] = subject or f"Depot Capacity Alert – {date.today().isoformat()}"
    msg.attach(MIMEText(body_text, "plain"))

    try:
        with smtplib.SMTP(config.SMTP_SERVER, config.SMTP_PORT) as server:
            server.sendmail(config.SENDER_EMAIL, recipients, msg.as_string())
        log.info(f"Capacity alert sent to: {', '.join(recipients)}")
    except Exception:
        log.error("Failed to send capacity alert email", exc_info=True)
        raise
