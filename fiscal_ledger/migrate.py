"""Command-line entry point for the company entity migration.

Usage:
    python -m fiscal_ledger.migrate [--dry-run] [--report-file PATH] [--create-tables]
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fiscal_ledger.core.config import settings
from fiscal_ledger.core.database import close_database, init_database
from fiscal_ledger.core.exceptions import AppError, MigrationError
from fiscal_ledger.schemas.migration import DryRunReport
from fiscal_ledger.services.migration.company_entities import (
    migrate_company_data_to_company_collection,
)
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fiscal_ledger.migrate",
        description="Move company/person data embedded in transactions into "
        "the companies and persons tables.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Analyse and report what would change without writing anything",
    )
    parser.add_argument(
        "--report-file",
        type=Path,
        default=None,
        help="Write the dry-run JSON report to this path",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the models before migrating",
    )
    return parser.parse_args(argv)


def resolve_report_path(report_file: Optional[Path]) -> Optional[Path]:
    """Pick where the dry-run report goes, if anywhere.

    An explicit ``--report-file`` wins; otherwise a timestamped file inside
    ``MIGRATION_REPORT_DIR`` when that is configured.
    """
    if report_file is not None:
        return report_file

    if settings.migration.report_dir:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        return Path(settings.migration.report_dir) / f"company-entities-dry-run-{stamp}.json"

    return None


def write_report(report: DryRunReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    LOGGER.info(f"Dry-run report written to {path}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Run the migration and return the process exit code."""
    args = parse_args(argv)

    try:
        await init_database(create_tables=args.create_tables)
        result = await migrate_company_data_to_company_collection(dry_run=args.dry_run)

        if isinstance(result, DryRunReport):
            report_path = resolve_report_path(args.report_file)
            if report_path is not None:
                write_report(result, report_path)
            print(json.dumps(result.to_json_dict()["summary"], indent=2))
        else:
            print(json.dumps(result.model_dump(by_alias=True), indent=2))

        return 0

    except MigrationError as e:
        LOGGER.error(f"Migration aborted: {e}")
        report_path = resolve_report_path(args.report_file)
        if isinstance(e.report, DryRunReport) and report_path is not None:
            write_report(e.report, report_path)
        return 1

    except AppError as e:
        LOGGER.error(f"Migration failed: {e}")
        return 1

    finally:
        await close_database()


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
