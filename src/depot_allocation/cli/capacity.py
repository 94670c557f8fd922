import argparse

from depot_allocation.capacity_reporting.depot_capacity_usecase import run_depot_capacity_report
from depot_allocation.pdf.capacity_report_pdf import write_capacity_report_pdf
from depot_allocation.presentation.console import render_depot_capacity
from depot_allocation.presentation.email import (
    render_capacity_alert_email,
    send_capacity_alert_email,
)
from depot_allocation.utils.config import config
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Depot Capacity Report"
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Also write the report as a PDF under OUTPUT_DIR",
    )
    parser.add_argument(
        "--email",
        action="store_true",
        help="Email the capacity alert to default recipients",
    )
    parser.add_argument(
        "--alerts-only",
        action="store_true",
        help="With --email: only send when a depot is WARNING or CRITICAL",
    )

    args = parser.parse_args()

    report = run_depot_capacity_report()
    print(render_depot_capacity(report))

    if args.pdf:
        pdf_path = write_capacity_report_pdf(report)
        print(f"PDF: {pdf_path}")

    if args.email:
        if args.alerts_only and not report.has_alerts:
            log.info("No depot above warning; alert email skipped")
            return
        send_capacity_alert_email(
            render_capacity_alert_email(report),
            recipients=config.DEFAULT_RECIPIENTS,
        )


if __name__ == "__main__":
    main()
