"""
Capacity / Grade Policy

Rules:
- Pure functions only
- No database access
- No ledger access (callers pass current values in)
- Thresholds come from AllocationConfig
"""

from typing import Optional

from depot_allocation.recommendation.allocation_config import AllocationConfig


# ----------------------------
# Utilization
# ----------------------------

def utilization_after_add(capacity: float, available: float, add: float) -> float:
    """
    Utilization percent once `add` TEU land in a depot.

    Non-positive capacity counts as fully saturated.
    """
    if capacity <= 0:
        return 100.0
    return ((capacity - available) + add) / capacity * 100


def is_in_optimal_range(utilization: float, config: AllocationConfig) -> bool:
    if not config.features.capacity_range_enforcement:
        return True
    c = config.capacity
    return c.target_min * 100 <= utilization <= c.target_max * 100


def exceeds_recommended_max(utilization: float, config: AllocationConfig) -> bool:
    if not config.features.capacity_range_enforcement:
        return False
    return utilization > config.capacity.target_max * 100


def is_warning(utilization: float, config: AllocationConfig) -> bool:
    return utilization >= config.capacity.warning * 100


def is_critical(utilization: float, config: AllocationConfig) -> bool:
    return utilization >= config.capacity.critical * 100


# ----------------------------
# Grade
# ----------------------------

def is_grade_compatible(depot_name: str, grade: Optional[str], config: AllocationConfig) -> bool:
    """
    Unset grade, or a depot without configured grades, accepts anything.
    """
    if not grade or not config.features.grade_aware_allocation:
        return True
    accepted = config.accepted_grades(depot_name)
    if not accepted:
        return True
    return grade.strip().upper() in accepted
