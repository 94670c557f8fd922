"""
Depot data access layer.

Sources:
- depots      (id, name, location, capacity_teu)
- containers  (depot_id, size_teu) for current usage
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy import insert, text

from depot_allocation.data.db import get_connection
from depot_allocation.data.schema import depots
from depot_allocation.recommendation.models import Depot


def get_depots_df() -> pd.DataFrame:
    """
    Expected columns:
      - id
      - name
      - location
      - capacity_teu
    """
    sql = """
        SELECT id, name, location, capacity_teu
        FROM depots
        ORDER BY name
    """
    with get_connection() as conn:
        return pd.read_sql(text(sql), conn)


def get_depots() -> List[Depot]:
    df = get_depots_df()
    return [
        Depot(
            id=int(row["id"]),
            name=str(row["name"]),
            capacity=float(row["capacity_teu"]) if pd.notna(row["capacity_teu"]) else 0.0,
        )
        for _, row in df.iterrows()
    ]


def get_depot(depot_id: int) -> Optional[Depot]:
    sql = "SELECT id, name, capacity_teu FROM depots WHERE id = :depot_id"
    with get_connection() as conn:
        row = conn.execute(text(sql), {"depot_id": depot_id}).mappings().first()
    if row is None:
        return None
    return Depot(id=int(row["id"]), name=str(row["name"]), capacity=float(row["capacity_teu"] or 0))


def get_used_teu_by_depot() -> Dict[int, float]:
    """
    Sum of container sizes per depot. A missing size counts as 1 TEU.
    Containers without a depot are ignored.
    """
    sql = """
        SELECT depot_id, SUM(COALESCE(size_teu, 1)) AS used_teu
        FROM containers
        WHERE depot_id IS NOT NULL
        GROUP BY depot_id
    """
    with get_connection() as conn:
        df = pd.read_sql(text(sql), conn)

    return {
        int(row["depot_id"]): float(row["used_teu"] or 0)
        for _, row in df.iterrows()
    }


def get_depot_usage_df() -> pd.DataFrame:
    """
    One row per depot with used / available TEU.

    Output columns:
      - id, name, location, capacity_teu
      - used_teu, available_teu, container_count
    """
    sql = """
        SELECT
            d.id,
            d.name,
            d.location,
            d.capacity_teu,
            COALESCE(SUM(CASE WHEN c.id IS NULL THEN 0 ELSE COALESCE(c.size_teu, 1) END), 0) AS used_teu,
            COUNT(c.id) AS container_count
        FROM depots d
        LEFT JOIN containers c
            ON c.depot_id = d.id
        GROUP BY d.id, d.name, d.location, d.capacity_teu
        ORDER BY d.name
    """
    with get_connection() as conn:
        df = pd.read_sql(text(sql), conn)

    df["used_teu"] = df["used_teu"].astype(float)
    df["available_teu"] = df["capacity_teu"].astype(float) - df["used_teu"]
    return df


def find_depot_by_keyword(keyword: str) -> Optional[Depot]:
    needle = keyword.strip().lower()
    for depot in get_depots():
        if needle and needle in depot.name.lower():
            return depot
    return None


def insert_depot(name: str, capacity_teu: float, location: Optional[str] = None) -> int:
    if capacity_teu is None or float(capacity_teu) <= 0:
        raise ValueError("Depot capacity must be positive")
    stmt = (
        insert(depots)
        .values(name=name, location=location, capacity_teu=float(capacity_teu))
        .returning(depots.c.id)
    )
    with get_connection() as conn:
        return int(conn.execute(stmt).scalar_one())
