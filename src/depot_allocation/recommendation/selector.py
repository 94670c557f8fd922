from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from depot_allocation.recommendation.allocation_config import AllocationConfig
from depot_allocation.recommendation.ledger import CapacityLedger
from depot_allocation.recommendation import policy

NO_SUITABLE_DEPOT = "no suitable depot"


@dataclass(frozen=True)
class Selection:
    depot_id: Optional[int]
    reason: str
    tier: int
    utilization_pct: Optional[float] = None


class DepotSelector:
    """
    Picks one depot per container by walking the selection tiers.

    1. preferred chain, optimal range      -> first in chain
    2. preferred chain, below target max   -> first in chain
    3. any depot, optimal range            -> random among matches
    4. any depot, not critical             -> most available TEU
    5. nothing fits                        -> None (or labelled fallback)

    Every tier requires enough available TEU, a non-critical result and a
    compatible grade. The ledger is only touched on success.
    """

    def __init__(
        self,
        ledger: CapacityLedger,
        config: AllocationConfig,
        rng: Optional[random.Random] = None,
    ):
        self.ledger = ledger
        self.config = config
        self.rng = rng or random.Random()

    # ------------------------------------------------------------
    # Candidate checks
    # ------------------------------------------------------------
    def _utilization(self, depot_id: int, size_teu: float) -> float:
        return policy.utilization_after_add(
            self.ledger.capacity(depot_id),
            self.ledger.available(depot_id),
            size_teu,
        )

    def _fits(self, depot_id: int, size_teu: float, grade: Optional[str]) -> bool:
        depot = self.ledger.depot(depot_id)
        if depot is None:
            return False
        if self.ledger.available(depot_id) < size_teu:
            return False
        if policy.is_critical(self._utilization(depot_id, size_teu), self.config):
            return False
        return policy.is_grade_compatible(depot.name, grade, self.config)

    def _optimal(self, depot_id: int, size_teu: float) -> bool:
        return policy.is_in_optimal_range(self._utilization(depot_id, size_teu), self.config)

    def _below_max(self, depot_id: int, size_teu: float) -> bool:
        return not policy.exceeds_recommended_max(self._utilization(depot_id, size_teu), self.config)

    def _candidates(
        self,
        depot_ids: Sequence[int],
        size_teu: float,
        grade: Optional[str],
        band: Callable[[int, float], bool],
    ) -> List[int]:
        return [
            d for d in depot_ids
            if self._fits(d, size_teu, grade) and band(d, size_teu)
        ]

    # ------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------
    def select(
        self,
        preferred_chain: Sequence[int],
        size_teu: float,
        grade: Optional[str] = None,
        rule_label: str = "",
    ) -> Selection:
        all_ids = [d.id for d in self.ledger.depots]
        prefix = f"{rule_label}: " if rule_label else ""

        # Tier 1
        matches = self._candidates(preferred_chain, size_teu, grade, self._optimal)
        if matches:
            return self._commit(
                1, matches[0], size_teu,
                prefix + "preferred depot {name} stays in optimal range ({util:.1f}% after +{size:g} TEU)",
            )

        # Tier 2
        matches = self._candidates(preferred_chain, size_teu, grade, self._below_max)
        if matches:
            return self._commit(
                2, matches[0], size_teu,
                prefix + "preferred depot {name} stays below recommended max ({util:.1f}% after +{size:g} TEU)",
            )

        # Tier 3
        matches = self._candidates(all_ids, size_teu, grade, self._optimal)
        if matches:
            pick = self.rng.choice(matches)
            return self._commit(
                3, pick, size_teu,
                prefix + f"no preferred depot fits; {{name}} picked at random among {len(matches)} "
                "depot(s) in optimal range ({util:.1f}% after +{size:g} TEU)",
            )

        # Tier 4
        matches = self._candidates(all_ids, size_teu, grade, lambda d, s: True)
        if matches:
            pick = max(matches, key=self.ledger.available)
            return self._commit(
                4, pick, size_teu,
                prefix + "no depot in optimal range; {name} has the most available capacity "
                "({util:.1f}% after +{size:g} TEU)",
            )

        # Tier 5
        if not self.config.features.critical_capacity_avoidance:
            fallback = [
                d.id for d in self.ledger.depots
                if policy.is_grade_compatible(d.name, grade, self.config)
            ]
            if fallback:
                pick = max(fallback, key=self.ledger.available)
                return self._commit(
                    5, pick, size_teu,
                    "FALLBACK: " + prefix + "all depots full or critical; {name} has the most "
                    "available capacity ({util:.1f}% after +{size:g} TEU)",
                )

        return Selection(
            depot_id=None,
            reason=f"{prefix}{NO_SUITABLE_DEPOT} (all depots full, critical or grade-incompatible "
                   f"for {size_teu:g} TEU)",
            tier=5,
        )

    def _commit(self, tier: int, depot_id: int, size_teu: float, template: str) -> Selection:
        util = self._utilization(depot_id, size_teu)
        self.ledger.reserve(depot_id, size_teu)
        name = self.ledger.depot(depot_id).name
        return Selection(
            depot_id=depot_id,
            reason=template.format(name=name, util=util, size=size_teu),
            tier=tier,
            utilization_pct=round(util, 2),
        )
