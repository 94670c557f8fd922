from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import delete, insert, select

from depot_allocation.data.db import get_connection
from depot_allocation.data.schema import operators, users


def get_user_role(email: str) -> Optional[str]:
    if not email:
        return None
    stmt = select(users.c.role).where(users.c.email == email)
    with get_connection() as conn:
        return conn.execute(stmt).scalar_one_or_none()


def set_user_role(email: str, role: str) -> None:
    with get_connection() as conn:
        conn.execute(delete(users).where(users.c.email == email))
        conn.execute(insert(users).values(email=email, role=role))


# ------------------------------------------------------------
# Operators
# ------------------------------------------------------------
def get_operators() -> List[Dict[str, Any]]:
    stmt = select(operators).order_by(operators.c.created_at.desc(), operators.c.id.desc())
    with get_connection() as conn:
        df = pd.read_sql(stmt, conn)
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def insert_operator(email: str, name: Optional[str] = None) -> Dict[str, Any]:
    if not email:
        raise ValueError("Operator email is required")
    stmt = (
        insert(operators)
        .values(email=email, name=name, is_active=True)
        .returning(operators.c.id)
    )
    with get_connection() as conn:
        new_id = conn.execute(stmt).scalar_one()
    return {"id": int(new_id), "email": email, "name": name, "is_active": True}


def delete_operator(operator_id: int) -> int:
    with get_connection() as conn:
        return conn.execute(delete(operators).where(operators.c.id == operator_id)).rowcount
