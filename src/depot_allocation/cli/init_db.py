import argparse

from depot_allocation.data.db import configure_engine
from depot_allocation.data.depots import get_depots, insert_depot
from depot_allocation.data.schema import create_schema
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)


def _parse_depot(raw: str):
    """NAME:CAPACITY[:LOCATION]"""
    parts = raw.split(":")
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"Expected NAME:CAPACITY[:LOCATION], got {raw!r}")
    try:
        capacity = float(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"Capacity must be a number: {parts[1]!r}")
    location = parts[2] if len(parts) > 2 else None
    return parts[0].strip(), capacity, location


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Create the depot tables and optionally seed depots"
    )
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    parser.add_argument(
        "--depot",
        action="append",
        type=_parse_depot,
        default=[],
        metavar="NAME:CAPACITY[:LOCATION]",
        help="Add a depot (repeatable). Skipped when the name already exists.",
    )
    args = parser.parse_args()

    engine = configure_engine(args.database_url)
    create_schema()
    log.info(f"Schema ready on {engine.url.render_as_string(hide_password=True)}")

    existing = {d.name for d in get_depots()}
    for name, capacity, location in args.depot:
        if name in existing:
            log.info(f"Depot exists, skipping: {name}")
            continue
        depot_id = insert_depot(name, capacity, location)
        existing.add(name)
        log.info(f"Depot added: {name} (id={depot_id}, capacity={capacity} TEU)")

    print(f"Database ready ({engine.url.get_backend_name()})")


if __name__ == "__main__":
    main()
