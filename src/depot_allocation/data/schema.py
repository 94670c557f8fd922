"""
Table layout of the depot dashboard store.

The hosted database owns the real schema; this mirrors it for local runs and tests.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    true,
)

from depot_allocation.data.db import get_engine

metadata = MetaData()

depots = Table(
    "depots",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(120), nullable=False),
    Column("location", String(200)),
    Column("capacity_teu", Float, nullable=False),
)

containers = Table(
    "containers",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("container_number", String(32), nullable=False, unique=True),
    Column("depot_id", Integer, ForeignKey("depots.id")),
    Column("size_teu", Float),
    Column("status", String(32), server_default="available"),
    Column("activity", String(64)),
    Column("logistics", String(16)),
    Column("grade", String(4)),
    Column("allocated_to", String(120)),
    Column("discharge_status", String(16)),
    Column("discharge_date", DateTime),
    Column("vessel_name", String(120)),
    Column("voyage_number", String(64)),
    Column("consignee_name", String(200)),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime),
)

allocation_history = Table(
    "allocation_history",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("container_id", Integer, ForeignKey("containers.id")),
    Column("from_depot_id", Integer, ForeignKey("depots.id")),
    Column("to_depot_id", Integer, ForeignKey("depots.id")),
    Column("quantity_teu", Float),
    Column("reason", Text),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)

activity_logs = Table(
    "activity_logs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_email", String(200)),
    Column("action", String(16)),
    Column("resource", String(64)),
    Column("resource_id", String(64)),
    Column("changes", Text),
    Column("timestamp", DateTime, server_default=func.current_timestamp()),
)

users = Table(
    "users",
    metadata,
    Column("email", String(200), primary_key=True),
    Column("role", String(32), nullable=False),
)

operators = Table(
    "operators",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(200), nullable=False),
    Column("name", String(200)),
    Column("is_active", Boolean, server_default=true()),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)


def create_schema() -> None:
    metadata.create_all(get_engine())


def drop_schema() -> None:
    metadata.drop_all(get_engine())
