import argparse

from depot_allocation.forecasting.empty_container_forecast import (
    FORECAST_DAYS,
    HISTORY_DAYS,
    run_empty_container_forecast,
)
from depot_allocation.presentation.console import render_forecast


def main() -> None:
    argparse.ArgumentParser(
        description=f"Empty container forecast ({HISTORY_DAYS}-day history, {FORECAST_DAYS}-day horizon)"
    ).parse_args()

    forecasts = run_empty_container_forecast()
    print(render_forecast(forecasts))


if __name__ == "__main__":
    main()
