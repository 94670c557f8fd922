from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional


# ------------------------------------------------------------
# Depot-level capacity result
# ------------------------------------------------------------
@dataclass
class DepotCapacityResult:
    depot_id: int
    name: str
    location: Optional[str]
    capacity_teu: float
    used_teu: float
    available_teu: float
    usage_pct: Optional[float]
    container_count: int
    status: str


# ------------------------------------------------------------
# Network summary (dashboard KPIs)
# ------------------------------------------------------------
@dataclass
class NetworkCapacitySummary:
    report_date: date
    total_depots: int
    network_capacity_teu: float
    network_used_teu: float
    network_available_teu: float
    network_utilization_pct: float

    depots_critical: int
    depots_warning: int
    depots_normal: int


@dataclass
class DepotCapacityReport:
    summary: NetworkCapacitySummary
    depots: List[DepotCapacityResult]

    @property
    def critical(self) -> List[DepotCapacityResult]:
        return [d for d in self.depots if d.status == "CRITICAL"]

    @property
    def warning(self) -> List[DepotCapacityResult]:
        return [d for d in self.depots if d.status == "WARNING"]

    @property
    def has_alerts(self) -> bool:
        return bool(self.critical or self.warning)


# ------------------------------------------------------------
# Rebalancing suggestion
# ------------------------------------------------------------
@dataclass(frozen=True)
class RebalancingSuggestion:
    container_id: int
    container_number: str
    current_depot: str
    current_depot_id: int
    from_utilization: float
    recommended_depot: str
    recommended_depot_id: int
    to_utilization: float
    size_teu: float
    priority: str
    reason: str

