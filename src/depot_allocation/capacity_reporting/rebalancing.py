"""
Rebalancing suggestions

Moves the smallest containers out of depots in the alert bands towards
depots below the warning band. Suggestions only; nothing is reserved,
so several suggestions may point at the same target.
"""

from __future__ import annotations

import math
from typing import Dict, List

import pandas as pd

from depot_allocation.capacity_reporting.capacity_models import (
    DepotCapacityReport,
    RebalancingSuggestion,
)
from depot_allocation.capacity_reporting.depot_capacity_usecase import run_depot_capacity_report
from depot_allocation.data.containers import get_containers_df
from depot_allocation.utils.logger import get_logger

logger = get_logger(__name__)

MOVABLE_SHARE = 0.2


def build_rebalancing_suggestions(
    report: DepotCapacityReport,
    df_containers: pd.DataFrame,
    limit: int = 10,
) -> List[RebalancingSuggestion]:
    """
    Expected container columns:
      - id, container_number, depot_id, size_teu
    """
    by_depot: Dict[int, pd.DataFrame] = {
        int(k): g for k, g in df_containers.groupby("depot_id")
    } if not df_containers.empty else {}

    sources = report.critical + report.warning
    targets = sorted(
        (d for d in report.depots if d.status == "NORMAL"),
        key=lambda d: d.available_teu,
        reverse=True,
    )

    suggestions: List[RebalancingSuggestion] = []

    for source in sources:
        held = by_depot.get(source.depot_id)
        if held is None or held.empty:
            continue

        sizes = held.assign(size_teu=held["size_teu"].fillna(1).astype(float))
        n_movable = math.ceil(len(sizes) * MOVABLE_SHARE)
        movable = sizes.sort_values("size_teu", kind="stable").head(n_movable)

        is_critical = source.status == "CRITICAL"
        from_util = round(source.usage_pct or 0.0, 1)

        for _, c in movable.iterrows():
            size = float(c["size_teu"])
            target = next((t for t in targets if t.available_teu >= size), None)
            if target is None:
                continue

            to_util = round((target.used_teu + size) / target.capacity_teu * 100, 1)
            suggestions.append(
                RebalancingSuggestion(
                    container_id=int(c["id"]),
                    container_number=str(c["container_number"]),
                    current_depot=source.name,
                    current_depot_id=source.depot_id,
                    from_utilization=from_util,
                    recommended_depot=target.name,
                    recommended_depot_id=target.depot_id,
                    to_utilization=to_util,
                    size_teu=size,
                    priority="high" if is_critical else "medium",
                    reason=(
                        f"{source.name} is critically full ({from_util:.0f}%)"
                        if is_critical
                        else f"{source.name} is approaching capacity ({from_util:.0f}%)"
                    ),
                )
            )

    return suggestions[:limit]


def run_rebalancing_suggestions(limit: int = 10) -> List[RebalancingSuggestion]:
    report = run_depot_capacity_report()
    df_containers = get_containers_df()
    suggestions = build_rebalancing_suggestions(report, df_containers, limit)
    logger.info("Rebalancing suggestions | count=%s", len(suggestions))
    return suggestions
