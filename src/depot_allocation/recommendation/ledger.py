from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from depot_allocation.recommendation.models import Depot


class CapacityLedger:
    """
    Running available TEU per depot for one recommendation batch.

    Seeded from capacity minus currently used TEU, then decremented as
    containers are placed. Values may go negative on the fallback path.
    """

    def __init__(self, depots: Iterable[Depot], used_by_depot: Mapping[int, float]):
        self._depots: Dict[int, Depot] = {}
        self._available: Dict[int, float] = {}
        for depot in depots:
            self._depots[depot.id] = depot
            used = float(used_by_depot.get(depot.id, 0.0) or 0.0)
            self._available[depot.id] = float(depot.capacity or 0.0) - used

    @property
    def depots(self) -> List[Depot]:
        return list(self._depots.values())

    def depot(self, depot_id: int) -> Optional[Depot]:
        return self._depots.get(depot_id)

    def capacity(self, depot_id: int) -> float:
        depot = self._depots.get(depot_id)
        return float(depot.capacity) if depot else 0.0

    def available(self, depot_id: int) -> float:
        return self._available.get(depot_id, 0.0)

    def reserve(self, depot_id: int, teu: float) -> float:
        if depot_id not in self._available:
            raise KeyError(f"Unknown depot id {depot_id}")
        self._available[depot_id] -= teu
        return self._available[depot_id]

    def top_available(self, n: int) -> List[int]:
        # Stable sort keeps depot order for ties
        ranked = sorted(self._depots, key=lambda d: self._available[d], reverse=True)
        return ranked[:max(n, 0)]

    def snapshot(self) -> Dict[int, float]:
        return dict(self._available)

    def __repr__(self):
        return f"<CapacityLedger depots={len(self._depots)}>"
