from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from sqlalchemy import insert, text, update

from depot_allocation.data.db import get_connection
from depot_allocation.data.schema import containers

CONTAINER_COLUMNS = [
    "container_number",
    "depot_id",
    "size_teu",
    "status",
    "activity",
    "logistics",
    "grade",
    "allocated_to",
    "discharge_status",
    "discharge_date",
    "vessel_name",
    "voyage_number",
    "consignee_name",
]


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # NaN -> None so rows serialize cleanly
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def get_containers_df(depot_id: Optional[int] = None) -> pd.DataFrame:
    sql = "SELECT * FROM containers"
    params: Dict[str, Any] = {}
    if depot_id is not None:
        sql += " WHERE depot_id = :depot_id"
        params["depot_id"] = int(depot_id)
    sql += " ORDER BY container_number"

    with get_connection() as conn:
        return pd.read_sql(text(sql), conn, params=params)


def get_containers(depot_id: Optional[int] = None) -> List[Dict[str, Any]]:
    return _records(get_containers_df(depot_id))


def get_container_activity_since(since: datetime) -> pd.DataFrame:
    """
    Container rows created on/after `since`, newest first.

    Output columns:
      - id, depot_id, activity, allocated_to, status, created_at
    """
    sql = """
        SELECT id, depot_id, activity, allocated_to, status, created_at
        FROM containers
        WHERE created_at >= :since
        ORDER BY created_at DESC
    """
    with get_connection() as conn:
        return pd.read_sql(text(sql), conn, params={"since": since.strftime("%Y-%m-%d %H:%M:%S")})


def get_recent_container_activity(days: int = 30) -> pd.DataFrame:
    return get_container_activity_since(datetime.now() - timedelta(days=days))


def find_container_id(container_number: str) -> Optional[int]:
    sql = "SELECT id FROM containers WHERE container_number = :container_number"
    with get_connection() as conn:
        row = conn.execute(text(sql), {"container_number": container_number}).first()
    return int(row[0]) if row else None


def insert_container(values: Dict[str, Any]) -> int:
    if not values.get("container_number"):
        raise ValueError("container_number is required")
    row = {k: values.get(k) for k in CONTAINER_COLUMNS if k in values}
    row.setdefault("status", "available")

    stmt = insert(containers).values(**row).returning(containers.c.id)
    with get_connection() as conn:
        return int(conn.execute(stmt).scalar_one())


def insert_containers(rows: Iterable[Dict[str, Any]]) -> int:
    """Bulk insert in one transaction. Returns the number of rows written."""
    rows = [{k: r.get(k) for k in CONTAINER_COLUMNS} for r in rows]
    if not rows:
        return 0

    with get_connection() as conn:
        conn.execute(insert(containers), rows)
    return len(rows)


def update_container(container_number: str, values: Dict[str, Any]) -> int:
    row = {k: v for k, v in values.items() if k in CONTAINER_COLUMNS and k != "container_number"}
    row["updated_at"] = datetime.now()
    stmt = (
        update(containers)
        .where(containers.c.container_number == container_number)
        .values(**row)
    )
    with get_connection() as conn:
        return conn.execute(stmt).rowcount


def update_container_depot(container_id: int, depot_id: int) -> int:
    stmt = (
        update(containers)
        .where(containers.c.id == container_id)
        .values(depot_id=depot_id, updated_at=datetime.now())
    )
    with get_connection() as conn:
        return conn.execute(stmt).rowcount


def update_discharge_status(container_id: int, discharge_status: str, discharge_date: Optional[datetime]) -> int:
    stmt = (
        update(containers)
        .where(containers.c.id == container_id)
        .values(discharge_status=discharge_status, discharge_date=discharge_date)
    )
    with get_connection() as conn:
        return conn.execute(stmt).rowcount


def delete_container(container_id: int) -> int:
    with get_connection() as conn:
        result = conn.execute(
            text("DELETE FROM containers WHERE id = :container_id"),
            {"container_id": container_id},
        )
        return result.rowcount
