"""
Empty container forecast

Linear extrapolation of the last 30 days of container activity per depot
into a 7-day need for empty containers.

- inbound:  discharge activity, or containers allocated to the depot by name
- outbound: rebalance / allocation activity
- need:     max(5, projected inbound + 10% of capacity)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import pandas as pd

from depot_allocation.data.containers import get_containers_df, get_recent_container_activity
from depot_allocation.data.depots import get_depots_df
from depot_allocation.utils.logger import get_logger

logger = get_logger(__name__)

HISTORY_DAYS = 30
FORECAST_DAYS = 7
SAFETY_BUFFER_SHARE = 0.1
MIN_NEEDED = 5
TREND_RATIO = 1.2


@dataclass(frozen=True)
class EmptyContainerForecast:
    depot_id: int
    depot_name: str
    current_empty: int
    forecast_needed: int
    forecast_confidence: float
    trend: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "depot_id": self.depot_id,
            "depot_name": self.depot_name,
            "current_empty": self.current_empty,
            "forecast_needed": self.forecast_needed,
            "forecast_confidence": self.forecast_confidence,
            "trend": self.trend,
            "recommendation": self.recommendation,
        }


def classify_trend(daily_inbound: float, daily_outbound: float) -> str:
    if daily_inbound > daily_outbound * TREND_RATIO:
        return "increasing"
    if daily_outbound > daily_inbound * TREND_RATIO:
        return "decreasing"
    return "stable"


def recommendation_for(deficit: int) -> str:
    if deficit > 10:
        return f"Add {deficit} empty containers urgently. Inbound activity is high."
    if deficit > 5:
        return f"Rebalance {deficit} empty containers from other depots soon."
    if deficit > 0:
        return f"Monitor closely. Possible shortage of {deficit} containers within {FORECAST_DAYS} days."
    return "Empty container stock is sufficient. Keep current level."


def forecast_empty_containers(
    df_depots: pd.DataFrame,
    df_containers: pd.DataFrame,
    df_activity: pd.DataFrame,
) -> List[EmptyContainerForecast]:
    """
    Expected columns:
      depots     - id, name, capacity_teu
      containers - depot_id, status, allocated_to
      activity   - depot_id, activity, allocated_to
    """
    forecasts: List[EmptyContainerForecast] = []

    for _, depot in df_depots.iterrows():
        depot_id = int(depot["id"])
        name = str(depot["name"])
        capacity = float(depot.get("capacity_teu") or 0)

        held = df_containers[df_containers["depot_id"] == depot_id] if not df_containers.empty else df_containers
        if held.empty:
            current_empty = 0
        else:
            allocated = held["allocated_to"].fillna("").astype(str).str.len() > 0
            current_empty = int(((held["status"] == "available") & ~allocated).sum())

        acts = df_activity[df_activity["depot_id"] == depot_id] if not df_activity.empty else df_activity
        if acts.empty:
            inbound = outbound = 0
        else:
            inbound = int(((acts["activity"] == "discharge") | (acts["allocated_to"] == name)).sum())
            outbound = int(acts["activity"].isin(["rebalance", "allocation"]).sum())

        daily_in = inbound / HISTORY_DAYS
        daily_out = outbound / HISTORY_DAYS

        predicted_in = math.ceil(daily_in * FORECAST_DAYS)
        safety_buffer = math.ceil(capacity * SAFETY_BUFFER_SHARE)
        needed = max(MIN_NEEDED, predicted_in + safety_buffer)

        confidence = min(0.95, 0.5 + (inbound + outbound) / 100)

        forecasts.append(
            EmptyContainerForecast(
                depot_id=depot_id,
                depot_name=name,
                current_empty=current_empty,
                forecast_needed=needed,
                forecast_confidence=round(confidence, 2),
                trend=classify_trend(daily_in, daily_out),
                recommendation=recommendation_for(needed - current_empty),
            )
        )

    return forecasts


def run_empty_container_forecast() -> List[EmptyContainerForecast]:
    logger.info("Running Empty Container Forecast | history=%sd | horizon=%sd", HISTORY_DAYS, FORECAST_DAYS)

    df_depots = get_depots_df()
    df_containers = get_containers_df()
    df_activity = get_recent_container_activity(HISTORY_DAYS)

    return forecast_empty_containers(df_depots, df_containers, df_activity)
