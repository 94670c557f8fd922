from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import insert, select

from depot_allocation.data.db import get_connection
from depot_allocation.data.schema import allocation_history, depots


def get_allocation_history(limit: int = 50) -> List[Dict[str, Any]]:
    """
    Latest transfers, newest first, with depot names resolved.
    """
    h = allocation_history
    from_depot = depots.alias("fd")
    to_depot = depots.alias("td")

    stmt = (
        select(
            h.c.id,
            h.c.container_id,
            h.c.from_depot_id,
            from_depot.c.name.label("from_depot_name"),
            h.c.to_depot_id,
            to_depot.c.name.label("to_depot_name"),
            h.c.quantity_teu,
            h.c.reason,
            h.c.created_at,
        )
        .select_from(
            h.outerjoin(from_depot, from_depot.c.id == h.c.from_depot_id)
             .outerjoin(to_depot, to_depot.c.id == h.c.to_depot_id)
        )
        .order_by(h.c.created_at.desc(), h.c.id.desc())
        .limit(int(limit))
    )
    with get_connection() as conn:
        df = pd.read_sql(stmt, conn)

    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def insert_allocation_history(
    container_id: int,
    from_depot_id: Optional[int],
    to_depot_id: int,
    quantity_teu: Optional[float],
    reason: Optional[str],
) -> Dict[str, Any]:
    row = {
        "container_id": container_id,
        "from_depot_id": from_depot_id,
        "to_depot_id": to_depot_id,
        "quantity_teu": quantity_teu,
        "reason": reason,
    }
    with get_connection() as conn:
        new_id = conn.execute(
            insert(allocation_history).values(**row).returning(allocation_history.c.id)
        ).scalar_one()
    return {"id": int(new_id), **row}
