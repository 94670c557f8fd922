"""
Bulk container import

Purpose:
- Write a parsed upload (CSV / XLSX rows) into the container table
- Each row lands in the operator's chosen depot, else the recommended one
- Keep an audit trail of every import in the activity log

Important:
- Row-by-row upsert keyed on container_number
- A failing row is counted and skipped; the rest of the batch continues
- Vessel manifests use a separate path (import_manifest)
"""

from __future__ import annotations

import random
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from depot_allocation.data.activity_log import get_activity_logs, log_activity
from depot_allocation.data.containers import (
    find_container_id,
    insert_container,
    insert_containers,
    update_container,
)
from depot_allocation.data.depots import find_depot_by_keyword, get_depots
from depot_allocation.recommendation.allocation_config import AllocationConfig
from depot_allocation.recommendation.models import (
    Activity,
    IncomingContainer,
    normalize_size,
)
from depot_allocation.recommendation.recommend_usecase import run_depot_recommendation
from depot_allocation.utils.config import config
from depot_allocation.utils.logger import get_logger

logger = get_logger(__name__)

IMPORT_RESOURCE = "bulk_import"
MANIFEST_DISCHARGE_STATUS = "MOB"


@dataclass
class BulkImportResult:
    batch_id: str
    total_rows: int
    imported: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    total_incoming_teu: float = 0.0
    by_depot: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Imported {self.imported} containers ({self.created} created, {self.updated} updated)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "batch_id": self.batch_id,
            "total_rows": self.total_rows,
            "imported": self.imported,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "total_incoming_teu": self.total_incoming_teu,
            "by_depot": self.by_depot,
            "message": self.message,
        }


def _discharge_state(row: Mapping[str, Any]) -> Optional[str]:
    raw = row.get("state") or row.get("discharge_status")
    if not raw:
        return None
    normalized = str(raw).strip().upper()
    return normalized or None


def _container_values(container: IncomingContainer, depot_id: int, row: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "depot_id": depot_id,
        "size_teu": container.size_teu,
        "status": "available",
        "activity": container.activity.value if container.activity is not Activity.UNKNOWN else row.get("activity"),
        "logistics": {True: "yes", False: "no"}.get(container.logistics, row.get("logistics")),
        "grade": container.grade,
    }
    discharge = _discharge_state(row)
    if discharge:
        values["discharge_status"] = discharge
    return values


def bulk_import(
    rows: Sequence[Mapping[str, Any]],
    user_email: Optional[str] = None,
    file_name: Optional[str] = None,
    allocation_config: Optional[AllocationConfig] = None,
    rng: Optional[random.Random] = None,
) -> BulkImportResult:
    if not rows:
        raise ValueError("Invalid containers data")

    result = BulkImportResult(batch_id=uuid.uuid4().hex, total_rows=len(rows))
    containers = [IncomingContainer.from_row(r) for r in rows]

    # Recommend only when some row has no operator choice.
    # Operator-chosen depots are charged to the batch ledger in row order.
    recommended: Dict[int, Optional[int]] = {}
    if any(c.depot_id is None for c in containers):
        for decision in run_depot_recommendation(rows, allocation_config, rng, honor_assigned=True):
            recommended[decision.index] = decision.depot_id

    names = {d.id: d.name for d in get_depots()}
    incoming: "OrderedDict[int, float]" = OrderedDict()

    logger.info("Bulk import | batch=%s | rows=%s | file=%s", result.batch_id, len(rows), file_name or "-")

    for index, (row, container) in enumerate(zip(rows, containers)):
        depot_id = container.depot_id if container.depot_id is not None else recommended.get(index)

        if not container.container_number or depot_id is None or depot_id not in names:
            logger.warning("Skipping row %s (%s): no container number or depot", index, container.container_number or "?")
            result.failed += 1
            continue

        values = _container_values(container, depot_id, row)
        try:
            if find_container_id(container.container_number) is not None:
                update_container(container.container_number, values)
                result.updated += 1
            else:
                insert_container({"container_number": container.container_number, **values})
                result.created += 1
        except SQLAlchemyError:
            logger.warning("Row %s (%s) failed to import", index, container.container_number, exc_info=True)
            result.failed += 1
            continue

        result.imported += 1
        incoming[depot_id] = incoming.get(depot_id, 0.0) + container.size_teu

    result.total_incoming_teu = round(sum(incoming.values()), 2)
    result.by_depot = [
        {"depot_id": d, "depot_name": names.get(d), "incoming_teu": round(teu, 2)}
        for d, teu in incoming.items()
    ]

    log_activity(
        user_email,
        "create",
        IMPORT_RESOURCE,
        result.batch_id,
        {
            "file_name": file_name,
            "total_rows": result.total_rows,
            "total_incoming_teu": result.total_incoming_teu,
            "imported": result.imported,
            "created": result.created,
            "updated": result.updated,
            "failed": result.failed,
            "by_depot": result.by_depot,
        },
    )
    logger.info("Bulk import done | %s | failed=%s", result.message, result.failed)
    return result


def import_history(limit: Any = 50) -> List[Dict[str, Any]]:
    """Bulk imports from the activity log, newest first. Limit clamped to 1..200."""
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = 50
    limit = min(max(limit, 1), 200)

    history = []
    for row in get_activity_logs(limit=limit, resource_like="import"):
        changes = row.get("changes") or {}
        history.append(
            {
                "id": row.get("id"),
                "batch_id": row.get("resource_id"),
                "user_email": row.get("user_email"),
                "file_name": changes.get("file_name") or "-",
                "total_rows": changes.get("total_rows", 0),
                "total_incoming_teu": changes.get("total_incoming_teu", 0),
                "imported": changes.get("imported", 0),
                "created": changes.get("created", 0),
                "updated": changes.get("updated", 0),
                "by_depot": changes.get("by_depot", []),
                "timestamp": row.get("timestamp"),
            }
        )
    return history


def import_manifest(rows: Sequence[Mapping[str, Any]]) -> int:
    """
    Vessel manifest rows -> new containers in the manifest depot,
    discharge status MOB.
    """
    if not rows:
        raise ValueError("No containers to import")

    depot = find_depot_by_keyword(config.MANIFEST_DEPOT_KEYWORD)
    if depot is None:
        raise ValueError(f"No depot matches manifest keyword {config.MANIFEST_DEPOT_KEYWORD!r}")

    now = datetime.now()
    records = []
    for row in rows:
        if not isinstance(row, Mapping):
            raise ValueError("Manifest rows must be objects")
        number = str(row.get("container_number") or "").strip()
        if not number:
            raise ValueError("Manifest row without container_number")
        records.append(
            {
                "container_number": number,
                "size_teu": normalize_size(row.get("size_teu")),
                "depot_id": depot.id,
                "activity": Activity.STRIPPING_OUTSIDE.value,
                "logistics": "no",
                "status": "available",
                "vessel_name": row.get("vessel_name"),
                "voyage_number": row.get("voyage_number"),
                "discharge_status": MANIFEST_DISCHARGE_STATUS,
                "consignee_name": row.get("consignee_name"),
                "discharge_date": now,
            }
        )

    written = insert_containers(records)
    logger.info("Manifest import | depot=%s | containers=%s", depot.name, written)
    return written
