import argparse

from depot_allocation.capacity_reporting.rebalancing import run_rebalancing_suggestions
from depot_allocation.presentation.console import render_rebalancing


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Suggest container moves out of full depots"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of suggestions (default 10)",
    )
    args = parser.parse_args()

    print(render_rebalancing(run_rebalancing_suggestions(limit=args.limit)))


if __name__ == "__main__":
    main()
