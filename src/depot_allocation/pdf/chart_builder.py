# src/depot_allocation/pdf/chart_builder.py
"""
Chart Builder: depot utilization bar chart
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from depot_allocation.capacity_reporting.capacity_models import DepotCapacityResult  # noqa: E402
from depot_allocation.pdf.styles import STATUS_COLORS, STATUS_NEUTRAL  # noqa: E402


def build_utilization_chart(
    depots: Sequence[DepotCapacityResult],
    output_dir: Path,
    warning_pct: float,
    critical_pct: float,
) -> Path | None:
    if not depots:
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    chart_path = output_dir / "depot_utilization.png"

    names = [d.name for d in depots]
    values = [d.usage_pct or 0.0 for d in depots]
    bar_colors = [STATUS_COLORS.get(d.status, STATUS_NEUTRAL) for d in depots]

    plt.figure(figsize=(10, max(3, 0.45 * len(depots) + 1.5)))
    plt.barh(names, values, color=bar_colors)
    plt.axvline(warning_pct, color=STATUS_COLORS["WARNING"], linestyle="--", linewidth=1, label=f"Warning {warning_pct:.0f}%")
    plt.axvline(critical_pct, color=STATUS_COLORS["CRITICAL"], linestyle="--", linewidth=1, label=f"Critical {critical_pct:.0f}%")

    plt.xlabel("Utilization (%)", fontsize=11)
    plt.title("Depot Utilization", fontsize=13)
    plt.xlim(0, max(100.0, max(values) + 5))
    plt.gca().invert_yaxis()
    plt.legend(loc="lower right")
    plt.grid(True, axis="x", alpha=0.3)
    plt.tight_layout()

    plt.savefig(chart_path, dpi=200, bbox_inches="tight", facecolor="white")
    plt.close()
    return chart_path
