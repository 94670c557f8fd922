# tests/allocation_test.py
from __future__ import annotations

import random

import pytest
from sqlalchemy.exc import SQLAlchemyError

from depot_allocation.allocation import transfer_usecase
from depot_allocation.allocation.import_usecase import (
    bulk_import,
    import_history,
    import_manifest,
)
from depot_allocation.allocation.transfer_usecase import (
    AllocationError,
    set_discharge_status,
    transfer_container,
)
from depot_allocation.data.activity_log import get_activity_logs
from depot_allocation.data.allocation_history import get_allocation_history
from depot_allocation.data.containers import get_containers, insert_container
from depot_allocation.recommendation.allocation_config import AllocationConfig
from depot_allocation.utils.config import config as app_config


def _container(number):
    return next(c for c in get_containers() if c["container_number"] == number)


# ───────────────────────── transfers ───────────────────────── #

def test_transfer_moves_container_and_records_history(db):
    yon, japfa = db["Depo Yon"], db["Depo Japfa"]
    cid = insert_container({"container_number": "T1", "depot_id": yon, "size_teu": 2})

    history = transfer_container(cid, yon, japfa, 2, "rebalance", "ops@depot.id")

    assert history["to_depot_id"] == japfa
    assert _container("T1")["depot_id"] == japfa
    assert get_allocation_history()[0]["to_depot_name"] == "Depo Japfa"
    assert get_activity_logs(resource_like="allocations")[0]["user_email"] == "ops@depot.id"


def test_transfer_unknown_container(db):
    with pytest.raises(AllocationError) as err:
        transfer_container(999, None, db["Depo Yon"])
    assert err.value.step == "update"
    assert get_allocation_history() == []


def test_transfer_needs_ids(db):
    with pytest.raises(ValueError):
        transfer_container(None, None, db["Depo Yon"])
    with pytest.raises(ValueError):
        transfer_container(1, None, None)


def test_history_failure_leaves_container_moved(db, monkeypatch):
    yon, depo4 = db["Depo Yon"], db["Depo 4"]
    cid = insert_container({"container_number": "T2", "depot_id": yon})

    def broken(**kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(transfer_usecase, "insert_allocation_history", broken)

    with pytest.raises(AllocationError) as err:
        transfer_container(cid, yon, depo4)

    assert err.value.step == "history"
    assert _container("T2")["depot_id"] == depo4


# ───────────────────────── discharge status ───────────────────────── #

def test_fac_stamps_discharge_date(db):
    cid = insert_container({"container_number": "D1", "depot_id": db["Depo Yon"]})

    assert set_discharge_status(cid, "fac")
    row = _container("D1")
    assert row["discharge_status"] == "FAC"
    assert row["discharge_date"] is not None

    assert set_discharge_status(cid, "MOB")
    row = _container("D1")
    assert row["discharge_status"] == "MOB"
    assert row["discharge_date"] is None


def test_discharge_status_requires_fields(db):
    with pytest.raises(ValueError):
        set_discharge_status(None, "FAC")
    with pytest.raises(ValueError):
        set_discharge_status(1, "")


def test_discharge_status_unknown_container(db):
    assert set_discharge_status(999, "FAC") is False


# ───────────────────────── bulk import ───────────────────────── #

def test_bulk_import_uses_explicit_depot_or_recommendation(db):
    rows = [
        {"container_number": "B1", "activity": "stripping luar", "logistics": "no", "size_teu": 2},
        {"container_number": "B2", "activity": "stuffing dalam", "logistics": "yes", "size_teu": 1,
         "depot_id": db["Depo Teluk Bayur"], "state": "fac"},
    ]

    result = bulk_import(rows, "ops@depot.id", "arrivals.csv", AllocationConfig(), random.Random(0))

    assert (result.imported, result.created, result.updated, result.failed) == (2, 2, 0, 0)
    assert result.total_incoming_teu == 3.0
    assert {d["depot_name"]: d["incoming_teu"] for d in result.by_depot} == {
        "Depo Yon": 2.0,
        "Depo Teluk Bayur": 1.0,
    }
    assert _container("B1")["depot_id"] == db["Depo Yon"]
    assert _container("B1")["activity"] == "stripping_luar"
    assert _container("B2")["discharge_status"] == "FAC"
    assert result.message == "Imported 2 containers (2 created, 0 updated)"


def test_bulk_import_explicit_rows_do_not_skew_recommendations(db):
    insert_container({"container_number": "OLD", "depot_id": db["Depo Yon"], "size_teu": 65})
    rows = [
        {"container_number": "E1", "size_teu": 10, "depot_id": db["Depo Japfa"]},
        {"container_number": "R1", "activity": "stripping luar", "logistics": "no", "size_teu": 10},
    ]

    bulk_import(rows, allocation_config=AllocationConfig(), rng=random.Random(0))

    assert _container("E1")["depot_id"] == db["Depo Japfa"]
    # Yon still at 65 when R1 is placed: 75% keeps it in the optimal range
    assert _container("R1")["depot_id"] == db["Depo Yon"]


def test_bulk_import_updates_existing_numbers(db):
    rows = [{"container_number": "B1", "depot_id": db["Depo Yon"], "size_teu": 1}]
    bulk_import(rows)
    result = bulk_import([{**rows[0], "depot_id": db["Depo Japfa"], "grade": "c"}])

    assert (result.created, result.updated) == (0, 1)
    row = _container("B1")
    assert row["depot_id"] == db["Depo Japfa"]
    assert row["grade"] == "C"


def test_bulk_import_counts_bad_rows(db):
    rows = [
        {"container_number": "", "depot_id": db["Depo Yon"]},
        {"container_number": "B9", "depot_id": 999},
        "garbage",
        {"container_number": "B10", "depot_id": db["Depo Yon"]},
    ]
    result = bulk_import(rows)

    assert result.failed == 3
    assert result.imported == 1


def test_bulk_import_rejects_empty_input(db):
    with pytest.raises(ValueError):
        bulk_import([])


def test_import_history(db):
    result = bulk_import([{"container_number": "H1", "depot_id": db["Depo Yon"], "size_teu": 2}], file_name="h.xlsx")

    history = import_history()

    assert len(history) == 1
    entry = history[0]
    assert entry["batch_id"] == result.batch_id
    assert entry["file_name"] == "h.xlsx"
    assert entry["imported"] == 1
    assert entry["total_incoming_teu"] == 2.0


def test_import_history_limit_is_clamped(db):
    for i in range(3):
        bulk_import([{"container_number": f"H{i}", "depot_id": db["Depo Yon"]}])

    assert len(import_history(0)) == 1
    assert len(import_history("not a number")) == 3
    assert len(import_history(10_000)) == 3


# ───────────────────────── manifest ───────────────────────── #

def test_manifest_goes_to_manifest_depot(db):
    written = import_manifest(
        [
            {"container_number": "V1", "size_teu": 2, "vessel_name": "KM Padang", "voyage_number": "12A"},
            {"container_number": "V2", "size_teu": None, "consignee_name": "PT Semen"},
        ]
    )

    assert written == 2
    v1, v2 = _container("V1"), _container("V2")
    assert v1["depot_id"] == db["Depo Yon"]
    assert v1["discharge_status"] == "MOB"
    assert v1["activity"] == "stripping_luar"
    assert v1["logistics"] == "no"
    assert v1["status"] == "available"
    assert v1["vessel_name"] == "KM Padang"
    assert v2["size_teu"] == 1.0


def test_manifest_requires_rows_and_numbers(db):
    with pytest.raises(ValueError):
        import_manifest([])
    with pytest.raises(ValueError):
        import_manifest([{"container_number": " "}])
    assert get_containers() == []


def test_manifest_without_matching_depot(db, monkeypatch):
    monkeypatch.setattr(app_config, "MANIFEST_DEPOT_KEYWORD", "Sungai")
    with pytest.raises(ValueError):
        import_manifest([{"container_number": "V1"}])
