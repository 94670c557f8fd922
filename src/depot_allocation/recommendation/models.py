from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


# ------------------------------------------------------------
# Depot (read from the data store)
# ------------------------------------------------------------
@dataclass(frozen=True)
class Depot:
    id: int
    name: str
    capacity: float


# ------------------------------------------------------------
# Activity classification
# ------------------------------------------------------------
class Activity(Enum):
    STRIPPING_OUTSIDE = "stripping_luar"
    STRIPPING_INSIDE = "stripping_dalam"
    STUFFING_OUTSIDE = "stuffing_luar"
    STUFFING_INSIDE = "stuffing_dalam"
    UNKNOWN = "unknown"

    @property
    def is_inside(self) -> bool:
        return self in (Activity.STRIPPING_INSIDE, Activity.STUFFING_INSIDE)

    @property
    def is_outside(self) -> bool:
        return self in (Activity.STRIPPING_OUTSIDE, Activity.STUFFING_OUTSIDE)


_INSIDE_WORDS = {"dalam", "inside", "in"}
_OUTSIDE_WORDS = {"luar", "outside", "out"}
_TRUE_WORDS = {"yes", "y", "ya", "true", "1"}
_FALSE_WORDS = {"no", "n", "tidak", "false", "0"}
VALID_GRADES = ("A", "B", "C")


def normalize_activity(raw: Any) -> Activity:
    """
    Map free-text activity to one of the four operations.

    Both an operation (stripping/stuffing) and a side (dalam/luar,
    inside/outside) must be present.
    """
    if raw is None:
        return Activity.UNKNOWN
    if isinstance(raw, Activity):
        return raw

    text = str(raw).strip().lower().replace("_", " ").replace("-", " ")
    words = set(text.split())

    if "strip" in text:
        operation = "stripping"
    elif "stuff" in text:
        operation = "stuffing"
    else:
        return Activity.UNKNOWN

    if words & _INSIDE_WORDS:
        side = "dalam"
    elif words & _OUTSIDE_WORDS:
        side = "luar"
    else:
        return Activity.UNKNOWN

    return Activity(f"{operation}_{side}")


def normalize_logistics(raw: Any) -> Optional[bool]:
    """True / False, or None when the value cannot be read."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        if raw == 1:
            return True
        if raw == 0:
            return False
        return None

    text = str(raw).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return None


def normalize_size(raw: Any, default: float = 1.0) -> float:
    if raw is None or isinstance(raw, bool):
        return default
    try:
        if isinstance(raw, str):
            value = float(raw.strip().replace(",", "."))
        else:
            value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


def normalize_grade(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip().upper()
    return text if text in VALID_GRADES else None


# ------------------------------------------------------------
# Incoming container (one batch row)
# ------------------------------------------------------------
@dataclass(frozen=True)
class IncomingContainer:
    container_number: str
    activity: Activity
    logistics: Optional[bool]
    size_teu: float = 1.0
    grade: Optional[str] = None
    depot_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Any) -> "IncomingContainer":
        # Non-object rows (null, strings) are treated as empty: Default rule
        if not isinstance(row, Mapping):
            row = {}
        depot_id = row.get("depot_id")
        try:
            depot_id = int(depot_id) if depot_id not in (None, "") else None
        except (TypeError, ValueError):
            depot_id = None

        return cls(
            container_number=str(row.get("container_number") or "").strip(),
            activity=normalize_activity(row.get("activity")),
            logistics=normalize_logistics(row.get("logistics")),
            size_teu=normalize_size(row.get("size_teu")),
            grade=normalize_grade(row.get("grade")),
            depot_id=depot_id,
        )


# ------------------------------------------------------------
# Decision (one per incoming container)
# ------------------------------------------------------------
@dataclass(frozen=True)
class RecommendationDecision:
    index: int
    depot_id: Optional[int]
    reason: str
    depot_name: Optional[str] = None
    rule: Optional[str] = None
    tier: Optional[int] = None
    container_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "recommended_depot_id": self.depot_id,
            "reason": self.reason,
            "recommended_depot_name": self.depot_name,
            "rule": self.rule,
            "tier": self.tier,
            "container_number": self.container_number,
        }
