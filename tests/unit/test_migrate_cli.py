"""Unit tests for the migration command-line entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from fiscal_ledger import migrate
from fiscal_ledger.core.exceptions import DatabaseError, MigrationError
from fiscal_ledger.schemas.migration import DryRunReport, DryRunSummary, MigrationStats


@pytest.fixture
def database():
    with patch("fiscal_ledger.migrate.init_database", new=AsyncMock()) as init_db, \
         patch("fiscal_ledger.migrate.close_database", new=AsyncMock()) as close_db:
        yield init_db, close_db


class TestParseArgs:

    def test_defaults(self):
        args = migrate.parse_args([])

        assert args.dry_run is False
        assert args.report_file is None
        assert args.create_tables is False

    def test_dry_run_with_report(self):
        args = migrate.parse_args(["--dry-run", "--report-file", "out/report.json"])

        assert args.dry_run is True
        assert args.report_file == Path("out/report.json")


class TestResolveReportPath:

    def test_explicit_path_wins(self, tmp_path):
        assert migrate.resolve_report_path(tmp_path / "r.json") == tmp_path / "r.json"

    def test_report_dir_from_settings(self, tmp_path):
        with patch.object(migrate.settings.migration, "report_dir", str(tmp_path)):
            path = migrate.resolve_report_path(None)

        assert path.parent == tmp_path
        assert path.name.startswith("company-entities-dry-run-")

    def test_no_destination(self):
        with patch.object(migrate.settings.migration, "report_dir", None):
            assert migrate.resolve_report_path(None) is None


class TestMain:

    @pytest.mark.asyncio
    async def test_real_run_prints_stats(self, database, capsys):
        stats = MigrationStats(companies_created=2)
        with patch(
            "fiscal_ledger.migrate.migrate_company_data_to_company_collection",
            new=AsyncMock(return_value=stats),
        ) as run:
            code = await migrate.main([])

        assert code == 0
        run.assert_awaited_once_with(dry_run=False)
        database[0].assert_awaited_once_with(create_tables=False)
        assert json.loads(capsys.readouterr().out)["companiesCreated"] == 2
        database[1].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dry_run_writes_report(self, database, tmp_path):
        report = DryRunReport(summary=DryRunSummary(transactions_analyzed=4))
        report_file = tmp_path / "nested" / "report.json"
        with patch(
            "fiscal_ledger.migrate.migrate_company_data_to_company_collection",
            new=AsyncMock(return_value=report),
        ):
            code = await migrate.main(["--dry-run", "--report-file", str(report_file)])

        assert code == 0
        written = json.loads(report_file.read_text(encoding="utf-8"))
        assert written["summary"]["transactionsAnalyzed"] == 4
        assert written["summary"]["isDryRun"] is True

    @pytest.mark.asyncio
    async def test_aborted_dry_run_still_writes_report(self, database, tmp_path):
        report = DryRunReport(summary=DryRunSummary(total_failed=1))
        error = MigrationError("Dry run aborted", report=report)
        report_file = tmp_path / "report.json"
        with patch(
            "fiscal_ledger.migrate.migrate_company_data_to_company_collection",
            new=AsyncMock(side_effect=error),
        ):
            code = await migrate.main(["--dry-run", "--report-file", str(report_file)])

        assert code == 1
        assert json.loads(report_file.read_text(encoding="utf-8"))["summary"]["totalFailed"] == 1

    @pytest.mark.asyncio
    async def test_failure_exits_non_zero_and_closes_database(self, database):
        with patch(
            "fiscal_ledger.migrate.migrate_company_data_to_company_collection",
            new=AsyncMock(side_effect=DatabaseError("down")),
        ):
            code = await migrate.main([])

        assert code == 1
        database[1].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_tables_flag_bootstraps_schema(self, database):
        with patch(
            "fiscal_ledger.migrate.migrate_company_data_to_company_collection",
            new=AsyncMock(return_value=MigrationStats()),
        ):
            code = await migrate.main(["--create-tables"])

        assert code == 0
        database[0].assert_awaited_once_with(create_tables=True)
