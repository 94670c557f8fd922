"""
Allocation configuration

Tunes depot recommendation behaviour:
- capacity thresholds (fractions of depot capacity)
- accepted container grades per depot
- activity / logistics preferred depot chains
- feature switches

Values are immutable. Environment overrides go through AllocationSettings
(ALLOCATION_* variables) and produce a fresh AllocationConfig.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------
# Capacity thresholds
# ------------------------------------------------------------
@dataclass(frozen=True)
class CapacityThresholds:
    target_min: float = 0.60   # below: underutilized
    target_max: float = 0.80   # preferred maximum
    warning: float = 0.85      # alert level, still acceptable
    critical: float = 0.95     # avoid new allocations

    def __post_init__(self):
        if not 0 < self.target_min <= self.target_max <= self.warning <= self.critical <= 1:
            raise ValueError(
                "Capacity thresholds must satisfy "
                "0 < target_min <= target_max <= warning <= critical <= 1, got "
                f"{self.target_min}/{self.target_max}/{self.warning}/{self.critical}"
            )


# ------------------------------------------------------------
# Activity & logistics rules
# ------------------------------------------------------------
@dataclass(frozen=True)
class ActivityRules:
    # Rule 1: stuffing/stripping OUTSIDE + no logistics
    outside_no_logistics: Tuple[str, ...] = ("Yon", "Japfa", "Teluk Bayur")
    # Rule 2: stuffing/stripping INSIDE + no logistics
    inside_no_logistics: Tuple[str, ...] = ("Japfa", "Teluk Bayur")
    # Rule 3: stuffing/stripping INSIDE + logistics
    inside_with_logistics: Tuple[str, ...] = ("Depo 4",)
    # Default: N depots with the most available TEU
    default_top_n: int = 3


@dataclass(frozen=True)
class AllocationFeatures:
    grade_aware_allocation: bool = True
    capacity_range_enforcement: bool = True
    critical_capacity_avoidance: bool = True


DEFAULT_GRADE_PREFERENCE: Dict[str, Tuple[str, ...]] = {
    "Depo 4": ("A", "B"),
    "Depo Japfa": ("B", "C", "A"),
    "Depo Teluk Bayur": ("C", "B"),
    "Depo Yon": ("B", "C"),
}


@dataclass(frozen=True)
class AllocationConfig:
    capacity: CapacityThresholds = field(default_factory=CapacityThresholds)
    activity_rules: ActivityRules = field(default_factory=ActivityRules)
    features: AllocationFeatures = field(default_factory=AllocationFeatures)
    grade_preference: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(DEFAULT_GRADE_PREFERENCE.items())

    def accepted_grades(self, depot_name: str) -> Tuple[str, ...]:
        """Grades configured for the first grade-map key contained in the depot name."""
        name = (depot_name or "").lower()
        for key, grades in self.grade_preference:
            if key.lower() in name:
                return grades
        return ()

    def with_grade_preference(self, mapping: Dict[str, Tuple[str, ...]]) -> "AllocationConfig":
        normalized = tuple(
            (key, tuple(g.strip().upper() for g in grades))
            for key, grades in mapping.items()
        )
        return replace(self, grade_preference=normalized)


# ------------------------------------------------------------
# Environment overrides
# ------------------------------------------------------------
class AllocationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ALLOCATION_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    target_min: float = 0.60
    target_max: float = 0.80
    warning: float = 0.85
    critical: float = 0.95

    grade_aware_allocation: bool = True
    capacity_range_enforcement: bool = True
    critical_capacity_avoidance: bool = True

    default_top_n: int = 3


class AllocationConfigError(RuntimeError):
    """ALLOCATION_* settings could not be turned into a valid AllocationConfig."""


def load_allocation_config(settings: Optional[AllocationSettings] = None) -> AllocationConfig:
    # pydantic ValidationError is a ValueError too
    try:
        s = settings or AllocationSettings()
        return AllocationConfig(
            capacity=CapacityThresholds(
                target_min=s.target_min,
                target_max=s.target_max,
                warning=s.warning,
                critical=s.critical,
            ),
            activity_rules=ActivityRules(default_top_n=s.default_top_n),
            features=AllocationFeatures(
                grade_aware_allocation=s.grade_aware_allocation,
                capacity_range_enforcement=s.capacity_range_enforcement,
                critical_capacity_avoidance=s.critical_capacity_avoidance,
            ),
        )
    except ValueError as e:
        raise AllocationConfigError(f"Invalid allocation settings: {e}") from e
