"""
Depot Recommendation Use Case

Purpose:
- Suggest a depot for every container in an incoming batch
- Spread the batch using a running in-memory capacity ledger
- Explain each suggestion (rule + selection tier)

Important:
- Suggestions only; nothing is written here
- ONE ledger per call, never shared between calls
- Order matters: earlier containers get first pick
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from depot_allocation.data.depots import get_depots, get_used_teu_by_depot
from depot_allocation.recommendation.allocation_config import (
    AllocationConfig,
    load_allocation_config,
)
from depot_allocation.recommendation.ledger import CapacityLedger
from depot_allocation.recommendation.models import (
    Depot,
    IncomingContainer,
    RecommendationDecision,
)
from depot_allocation.recommendation.rules import classify
from depot_allocation.recommendation.selector import DepotSelector
from depot_allocation.utils.logger import get_logger

logger = get_logger(__name__)


class DepotDataUnavailableError(RuntimeError):
    """Depots or their current usage could not be read; no batch can run."""


def recommend_batch(
    containers: Sequence[IncomingContainer],
    depots: Sequence[Depot],
    used_by_depot: Mapping[int, float],
    config: Optional[AllocationConfig] = None,
    rng: Optional[random.Random] = None,
    honor_assigned: bool = False,
) -> List[RecommendationDecision]:
    """
    One decision per container, same order as the input.

    With honor_assigned, a container that already carries a depot_id is
    charged to that depot and skips selection.
    """
    config = config or AllocationConfig()
    ledger = CapacityLedger(depots, used_by_depot)
    selector = DepotSelector(ledger, config, rng)

    decisions: List[RecommendationDecision] = []
    for index, container in enumerate(containers):
        if honor_assigned and container.depot_id is not None:
            decisions.append(_assigned_decision(index, container, ledger))
            continue

        rule, chain = classify(container.activity, container.logistics, ledger, config)
        selection = selector.select(chain, container.size_teu, container.grade, rule)

        depot = ledger.depot(selection.depot_id) if selection.depot_id is not None else None
        if depot is None:
            logger.warning(
                "No depot for container %s (row %s, %s TEU)",
                container.container_number or "?",
                index,
                container.size_teu,
            )
        elif selection.tier == 5:
            logger.warning(
                "Fallback allocation of %s to %s | available now %.2f TEU",
                container.container_number or "?",
                depot.name,
                ledger.available(depot.id),
            )

        decisions.append(
            RecommendationDecision(
                index=index,
                depot_id=selection.depot_id,
                reason=selection.reason,
                depot_name=depot.name if depot else None,
                rule=rule,
                tier=selection.tier,
                container_number=container.container_number or None,
            )
        )

    return decisions


def _assigned_decision(index: int, container: IncomingContainer, ledger: CapacityLedger) -> RecommendationDecision:
    depot = ledger.depot(container.depot_id)
    if depot is None:
        reason = f"Assigned depot {container.depot_id} not found"
    else:
        ledger.reserve(depot.id, container.size_teu)
        reason = f"Assigned to {depot.name} by operator"
    return RecommendationDecision(
        index=index,
        depot_id=depot.id if depot else None,
        reason=reason,
        depot_name=depot.name if depot else None,
        container_number=container.container_number or None,
    )


def load_depot_snapshot() -> tuple[List[Depot], Dict[int, float]]:
    """Depots + used TEU, or DepotDataUnavailableError."""
    try:
        depots = get_depots()
        used = get_used_teu_by_depot()
    except SQLAlchemyError as e:
        logger.error("Depot capacity snapshot unavailable", exc_info=True)
        raise DepotDataUnavailableError(f"Could not read depot capacity: {e}") from e
    return depots, used


def run_depot_recommendation(
    rows: Sequence[Mapping[str, Any]],
    config: Optional[AllocationConfig] = None,
    rng: Optional[random.Random] = None,
    honor_assigned: bool = False,
) -> List[RecommendationDecision]:
    """
    Recommend depots for raw container rows (free-text activity / logistics).
    """
    if not rows:
        return []

    config = config or load_allocation_config()
    depots, used = load_depot_snapshot()

    logger.info(
        "Running depot recommendation | containers=%s | depots=%s",
        len(rows),
        len(depots),
    )

    containers = [IncomingContainer.from_row(r) for r in rows]
    decisions = recommend_batch(containers, depots, used, config, rng, honor_assigned)

    placed = sum(1 for d in decisions if d.depot_id is not None)
    logger.info("Depot recommendation done | placed=%s | unplaced=%s", placed, len(decisions) - placed)
    return decisions
