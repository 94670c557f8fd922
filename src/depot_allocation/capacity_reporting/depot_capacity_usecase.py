"""
Depot Capacity Use Case (dashboard-facing)

Purpose:
- Snapshot used vs capacity TEU for every depot
- Flag depots in the warning / critical alert bands
- Network totals for the dashboard header

Important:
- Alert bands are the dashboard's (default 80% / 90%), not the allocation thresholds
- Used TEU counts every container in the depot; a missing size counts as 1
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

import pandas as pd

from depot_allocation.data.depots import get_depot_usage_df
from depot_allocation.utils.config import config
from depot_allocation.utils.logger import get_logger

from depot_allocation.capacity_reporting.capacity_models import (
    DepotCapacityReport,
    DepotCapacityResult,
    NetworkCapacitySummary,
)

logger = get_logger(__name__)


def classify_status(
    usage_pct: Optional[float],
    warning_pct: float = config.ALERT_WARNING_PCT,
    critical_pct: float = config.ALERT_CRITICAL_PCT,
) -> str:
    """
    - NO CAP    capacity unknown / zero
    - CRITICAL  >= critical band
    - WARNING   >= warning band
    - NORMAL    otherwise
    """
    if usage_pct is None:
        return "NO CAP"
    if usage_pct >= critical_pct:
        return "CRITICAL"
    if usage_pct >= warning_pct:
        return "WARNING"
    return "NORMAL"


def build_depot_capacity_report(
    df_usage: pd.DataFrame,
    warning_pct: float = config.ALERT_WARNING_PCT,
    critical_pct: float = config.ALERT_CRITICAL_PCT,
    report_date: Optional[date] = None,
) -> DepotCapacityReport:
    """
    Expected columns (see get_depot_usage_df):
      - id, name, location, capacity_teu, used_teu, container_count
    """
    results: List[DepotCapacityResult] = []

    for _, r in df_usage.iterrows():
        capacity = float(r.get("capacity_teu") or 0)
        used = float(r.get("used_teu") or 0)
        usage_pct = round(used / capacity * 100, 2) if capacity > 0 else None
        location = r.get("location")

        results.append(
            DepotCapacityResult(
                depot_id=int(r["id"]),
                name=str(r["name"]),
                location=None if location is None or pd.isna(location) else str(location),
                capacity_teu=capacity,
                used_teu=round(used, 2),
                available_teu=round(capacity - used, 2),
                usage_pct=usage_pct,
                container_count=int(r.get("container_count") or 0),
                status=classify_status(usage_pct, warning_pct, critical_pct),
            )
        )

    total_capacity = sum(d.capacity_teu for d in results)
    total_used = sum(d.used_teu for d in results)
    network_util = round(total_used / total_capacity * 100, 1) if total_capacity else 0.0

    critical = sum(1 for d in results if d.status == "CRITICAL")
    warning = sum(1 for d in results if d.status == "WARNING")

    summary = NetworkCapacitySummary(
        report_date=report_date or date.today(),
        total_depots=len(results),
        network_capacity_teu=round(total_capacity, 2),
        network_used_teu=round(total_used, 2),
        network_available_teu=round(total_capacity - total_used, 2),
        network_utilization_pct=network_util,
        depots_critical=critical,
        depots_warning=warning,
        depots_normal=len(results) - critical - warning,
    )

    return DepotCapacityReport(
        summary=summary,
        depots=sorted(results, key=lambda d: (d.usage_pct or 0.0), reverse=True),
    )


def run_depot_capacity_report() -> DepotCapacityReport:
    logger.info("Running Depot Capacity Report")

    df_usage = get_depot_usage_df()
    if df_usage.empty:
        logger.warning("No depots found")

    report = build_depot_capacity_report(df_usage)
    if report.has_alerts:
        logger.warning(
            "Capacity alerts | critical=%s | warning=%s",
            report.summary.depots_critical,
            report.summary.depots_warning,
        )
    return report
