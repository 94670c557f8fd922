# tests/conftest.py
from __future__ import annotations

import random

import pytest

from depot_allocation.data.db import configure_engine
from depot_allocation.data.depots import insert_depot
from depot_allocation.data.schema import create_schema, drop_schema
from depot_allocation.recommendation.allocation_config import AllocationConfig
from depot_allocation.recommendation.ledger import CapacityLedger
from depot_allocation.recommendation.models import Depot

YON, JAPFA, TELUK, DEPO4 = 1, 2, 3, 4


# ───────────────────────── in-memory depot network ───────────────────────── #

@pytest.fixture
def depots() -> list:
    """Four 100 TEU depots, in the order the ledger walks them."""
    return [
        Depot(YON, "Depo Yon", 100.0),
        Depot(JAPFA, "Depo Japfa", 100.0),
        Depot(TELUK, "Depo Teluk Bayur", 100.0),
        Depot(DEPO4, "Depo 4", 100.0),
    ]


@pytest.fixture
def make_ledger(depots):
    def _make(**used) -> CapacityLedger:
        by_id = {"yon": YON, "japfa": JAPFA, "teluk": TELUK, "depo4": DEPO4}
        return CapacityLedger(depots, {by_id[k]: v for k, v in used.items()})
    return _make


@pytest.fixture
def config() -> AllocationConfig:
    return AllocationConfig()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


# ───────────────────────── SQLite data store ───────────────────────── #

@pytest.fixture
def db():
    """
    Fresh in-memory database with the four depots.
    Returns depot name -> id.
    """
    configure_engine("sqlite://")
    create_schema()
    ids = {
        "Depo Yon": insert_depot("Depo Yon", 100, "Padang"),
        "Depo Japfa": insert_depot("Depo Japfa", 100, "Padang"),
        "Depo Teluk Bayur": insert_depot("Depo Teluk Bayur", 100, "Teluk Bayur"),
        "Depo 4": insert_depot("Depo 4", 100),
    }
    yield ids
    drop_schema()
