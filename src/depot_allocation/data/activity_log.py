from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError

from depot_allocation.data.db import get_connection
from depot_allocation.data.schema import activity_logs
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)

ACTIONS = ("create", "read", "update", "delete")


def log_activity(
    user_email: Optional[str],
    action: str,
    resource: str,
    resource_id: Union[str, int, None] = None,
    changes: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Record a user action. Best effort: a failed write is logged and
    never interrupts the operation being audited.
    """
    if action not in ACTIONS:
        raise ValueError(f"Unknown activity action {action!r}")

    row = {
        "user_email": user_email,
        "action": action,
        "resource": resource,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "changes": json.dumps(changes, default=str) if changes is not None else None,
    }
    try:
        with get_connection() as conn:
            conn.execute(insert(activity_logs).values(**row))
        return True
    except SQLAlchemyError:
        log.error("Failed to write activity log | resource=%s action=%s", resource, action, exc_info=True)
        return False


def get_activity_logs(limit: int = 200, resource_like: Optional[str] = None) -> List[Dict[str, Any]]:
    """Newest first. `changes` is decoded back to a dict."""
    stmt = select(activity_logs).order_by(activity_logs.c.timestamp.desc(), activity_logs.c.id.desc())
    if resource_like:
        stmt = stmt.where(activity_logs.c.resource.ilike(f"%{resource_like}%"))
    stmt = stmt.limit(int(limit))

    with get_connection() as conn:
        df = pd.read_sql(stmt, conn)

    records = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    for r in records:
        r["changes"] = _decode_changes(r.get("changes"))
    return records


def _decode_changes(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}
