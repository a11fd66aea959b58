"""Run notification sweeps from a system scheduler such as cron or systemd timers."""

from __future__ import annotations

import argparse
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from compliance_notifier.application.use_cases.sweeps import (
    SweepResult,
    check_document_reviews,
    check_insurance_expiries,
    check_lbp_status_changes,
    check_overdue_capas,
    check_programme_renewals,
    run_notification_cron,
)
from compliance_notifier.config import get_settings
from compliance_notifier.infrastructure.database import SessionLocal, initialize_database

JOBS = {
    "notifications": run_notification_cron,
    "insurance": check_insurance_expiries,
    "capa": check_overdue_capas,
    "documents": check_document_reviews,
    "renewals": check_programme_renewals,
    "lbp": check_lbp_status_changes,
}


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the sweep runner."""

    parser = argparse.ArgumentParser(
        description="Run one or more compliance notification sweeps.",
    )
    parser.add_argument(
        "jobs",
        nargs="*",
        default=["notifications"],
        help=f"Jobs to run, in order: {', '.join(sorted(JOBS))} (default: notifications)",
    )
    args = parser.parse_args()
    unknown = [name for name in args.jobs if name not in JOBS]
    if unknown:
        parser.error(f"unknown job(s): {', '.join(unknown)}")
    return args


def main() -> None:
    """Run the requested jobs and print a JSON summary."""

    args = parse_args()
    logging.basicConfig(level=get_settings().log_level.upper())

    initialize_database()

    session = SessionLocal()
    summary: dict[str, object] = {}
    try:
        for name in args.jobs:
            outcome = JOBS[name](session)
            summary[name] = outcome.as_dict() if isinstance(outcome, SweepResult) else outcome
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while running sweeps: {exc}") from exc
    finally:
        session.close()

    print(json.dumps(summary, indent=2, default=str))


if __name__ == "__main__":
    main()
