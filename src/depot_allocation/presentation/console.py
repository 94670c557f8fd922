from __future__ import annotations

import io
from typing import List, Sequence

from depot_allocation.capacity_reporting.capacity_models import (
    DepotCapacityReport,
    RebalancingSuggestion,
)
from depot_allocation.forecasting.empty_container_forecast import EmptyContainerForecast
from depot_allocation.recommendation.models import RecommendationDecision


def _format_table(rows: Sequence[Sequence[object]], headers: List[str], max_rows: int | None = None) -> str:
    output = io.StringIO()
    rows = list(rows)

    if max_rows is not None and len(rows) > max_rows:
        shown = rows[:max_rows]
        omitted = len(rows) - max_rows
    else:
        shown = rows
        omitted = 0

    widths = [len(h) for h in headers]
    for row in shown:
        for i, v in enumerate(row):
            widths[i] = max(widths[i], len("" if v is None else str(v)))

    def fmt(r):
        return " ".join(("" if r[i] is None else str(r[i])).ljust(widths[i]) for i in range(len(headers)))

    print(fmt(headers), file=output)
    print(" ".join("-" * w for w in widths), file=output)
    for row in shown:
        print(fmt(row), file=output)

    if omitted:
        print(f"... ({omitted} more rows omitted) ...", file=output)

    return output.getvalue()


def render_recommendations(decisions: Sequence[RecommendationDecision]) -> str:
    out = io.StringIO()

    placed = sum(1 for d in decisions if d.depot_id is not None)
    print("\n" + "=" * 80, file=out)
    print("DEPOT RECOMMENDATIONS", file=out)
    print("=" * 80, file=out)
    print(f"Containers: {len(decisions)}   Placed: {placed}   Unplaced: {len(decisions) - placed}", file=out)
    print(file=out)

    rows = [
        (
            d.index,
            d.container_number or "",
            d.depot_name or "-",
            d.tier if d.tier is not None else "",
            d.reason,
        )
        for d in decisions
    ]
    print(_format_table(rows, ["#", "container", "depot", "tier", "reason"], max_rows=500), file=out)
    return out.getvalue()


def render_depot_capacity(report: DepotCapacityReport) -> str:
    s = report.summary
    out = io.StringIO()

    print("\n" + "=" * 80, file=out)
    print("DEPOT CAPACITY REPORT", file=out)
    print("=" * 80, file=out)
    print(f"Report Date: {s.report_date.isoformat()}", file=out)
    print(f"Total Depots: {s.total_depots}", file=out)
    print(file=out)

    print(f"Network Capacity:    {s.network_capacity_teu:.2f} TEU", file=out)
    print(f"Network Used:        {s.network_used_teu:.2f} TEU", file=out)
    print(f"Network Available:   {s.network_available_teu:.2f} TEU", file=out)
    print(f"Network Utilization: {s.network_utilization_pct}%", file=out)
    print(file=out)

    print(f"Depots CRITICAL: {s.depots_critical}", file=out)
    print(f"Depots WARNING:  {s.depots_warning}", file=out)
    print(f"Depots NORMAL:   {s.depots_normal}", file=out)
    print(file=out)

    rows = [
        (
            d.name,
            f"{d.capacity_teu:.1f}",
            f"{d.used_teu:.1f}",
            f"{d.available_teu:.1f}",
            f"{d.usage_pct:.1f}%" if d.usage_pct is not None else "N/A",
            d.container_count,
            d.status,
        )
        for d in report.depots
    ]
    print(
        _format_table(rows, ["depot", "capacity_teu", "used_teu", "available_teu", "usage", "containers", "status"]),
        file=out,
    )
    return out.getvalue()


def render_rebalancing(suggestions: Sequence[RebalancingSuggestion]) -> str:
    if not suggestions:
        return "No rebalancing needed.\n"

    rows = [
        (
            s.priority.upper(),
            s.container_number,
            f"{s.current_depot} ({s.from_utilization:.1f}%)",
            f"{s.recommended_depot} ({s.to_utilization:.1f}%)",
            f"{s.size_teu:g}",
            s.reason,
        )
        for s in suggestions
    ]
    return _format_table(rows, ["priority", "container", "from", "to", "teu", "reason"])


def render_forecast(forecasts: Sequence[EmptyContainerForecast]) -> str:
    rows = [
        (
            f.depot_name,
            f.current_empty,
            f.forecast_needed,
            f"{f.forecast_confidence:.0%}",
            f.trend,
            f.recommendation,
        )
        for f in forecasts
    ]
    return _format_table(rows, ["depot", "empty", "needed_7d", "confidence", "trend", "recommendation"])
