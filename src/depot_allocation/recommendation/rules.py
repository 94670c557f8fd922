from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from depot_allocation.recommendation.allocation_config import AllocationConfig
from depot_allocation.recommendation.ledger import CapacityLedger
from depot_allocation.recommendation.models import Activity, Depot

RULE_1 = "Rule 1 (outside, no logistics)"
RULE_2 = "Rule 2 (inside, no logistics)"
RULE_3 = "Rule 3 (inside, logistics)"
RULE_DEFAULT = "Default (max available)"


def resolve_depot_keywords(keywords: Iterable[str], depots: Sequence[Depot]) -> List[int]:
    """
    Keyword chain -> depot ids, by case-insensitive substring on depot name.

    Unmatched keywords are dropped; chain order is kept, duplicates removed.
    """
    chain: List[int] = []
    for keyword in keywords:
        needle = keyword.strip().lower()
        if not needle:
            continue
        for depot in depots:
            if needle in (depot.name or "").lower() and depot.id not in chain:
                chain.append(depot.id)
    return chain


def classify(
    activity: Activity,
    logistics: Optional[bool],
    ledger: CapacityLedger,
    config: AllocationConfig,
) -> Tuple[str, List[int]]:
    """
    (rule label, preferred depot ids) for one container.

    Precedence:
    1. inside + logistics      -> Rule 3
    2. outside + no logistics  -> Rule 1
    3. inside + no logistics   -> Rule 2
    4. anything else           -> Default (top available, computed now)
    """
    rules = config.activity_rules
    depots = ledger.depots

    if activity.is_inside and logistics is True:
        return RULE_3, resolve_depot_keywords(rules.inside_with_logistics, depots)
    if activity.is_outside and logistics is False:
        return RULE_1, resolve_depot_keywords(rules.outside_no_logistics, depots)
    if activity.is_inside and logistics is False:
        return RULE_2, resolve_depot_keywords(rules.inside_no_logistics, depots)

    return RULE_DEFAULT, ledger.top_available(rules.default_top_n)
