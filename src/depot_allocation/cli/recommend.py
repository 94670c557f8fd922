import argparse
import random
from pathlib import Path

import pandas as pd

from depot_allocation.allocation.import_usecase import bulk_import
from depot_allocation.presentation.console import render_recommendations
from depot_allocation.recommendation.recommend_usecase import run_depot_recommendation
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)


def read_container_file(path: Path) -> list:
    """CSV, XLSX or JSON (list of objects) -> row dicts. Empty cells become None."""
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str)
    elif suffix in (".xlsx", ".xls"):
        df = pd.read_excel(path, dtype=str)
    elif suffix == ".json":
        df = pd.read_json(path, orient="records", dtype=False)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")

    df.columns = [str(c).strip().lower() for c in df.columns]
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Recommend a depot for every container in an incoming file"
    )
    parser.add_argument("path", type=Path, help="Container file (.csv, .xlsx or .json)")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Write the containers into their recommended depots (bulk import)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random pick among equally good depots",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Also write the recommendations to this CSV file",
    )
    parser.add_argument("--user", default=None, help="Email recorded in the activity log with --apply")

    args = parser.parse_args()

    rows = read_container_file(args.path)
    rng = random.Random(args.seed) if args.seed is not None else None

    decisions = run_depot_recommendation(rows, rng=rng, honor_assigned=True)
    print(render_recommendations(decisions))

    if args.output:
        pd.DataFrame([d.to_dict() for d in decisions]).to_csv(args.output, index=False)
        log.info(f"Recommendations written: {args.output}")

    if args.apply:
        if not rows:
            log.warning("Nothing to import: %s has no rows", args.path)
            return
        # Replay the same seed so the import lands where the preview said
        rng = random.Random(args.seed) if args.seed is not None else None
        result = bulk_import(rows, user_email=args.user, file_name=args.path.name, rng=rng)
        print(result.message)
        if result.failed:
            print(f"{result.failed} rows failed; see log for details")


if __name__ == "__main__":
    main()
