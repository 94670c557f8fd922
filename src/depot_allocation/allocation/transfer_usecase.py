from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from depot_allocation.data.activity_log import log_activity
from depot_allocation.data.allocation_history import insert_allocation_history
from depot_allocation.data.containers import update_container_depot, update_discharge_status
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)

DISCHARGE_COMPLETE = "FAC"


class AllocationError(RuntimeError):
    """A transfer step failed. `step` names which write broke."""

    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step


def transfer_container(
    container_id: int,
    from_depot_id: Optional[int],
    to_depot_id: int,
    quantity_teu: Optional[float] = None,
    reason: Optional[str] = None,
    user_email: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Move a container to another depot, then record the history row.

    The two writes are independent: when the history insert fails the
    container stays moved and AllocationError(step="history") is raised.
    """
    if container_id is None or to_depot_id is None:
        raise ValueError("container_id and to_depot_id are required")

    log.info("Transfer | container=%s | %s -> %s", container_id, from_depot_id, to_depot_id)

    try:
        moved = update_container_depot(int(container_id), int(to_depot_id))
    except SQLAlchemyError as e:
        raise AllocationError("update", f"Failed to update container: {e}") from e
    if not moved:
        raise AllocationError("update", f"Container {container_id} not found")

    try:
        history = insert_allocation_history(
            container_id=int(container_id),
            from_depot_id=from_depot_id,
            to_depot_id=int(to_depot_id),
            quantity_teu=quantity_teu,
            reason=reason,
        )
    except SQLAlchemyError as e:
        log.error("Container %s moved but history row failed", container_id, exc_info=True)
        raise AllocationError("history", f"Failed to record allocation: {e}") from e

    log_activity(user_email, "update", "allocations", container_id, history)
    return history


def set_discharge_status(container_id: int, discharge_status: str) -> bool:
    """FAC stamps the discharge date; any other status clears it."""
    if not container_id or not discharge_status:
        raise ValueError("Missing required fields")

    status = discharge_status.strip().upper()
    discharge_date = datetime.now() if status == DISCHARGE_COMPLETE else None
    return update_discharge_status(int(container_id), status, discharge_date) > 0
