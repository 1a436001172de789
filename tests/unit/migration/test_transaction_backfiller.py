"""Unit tests for TransactionBackfiller."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from fiscal_ledger.core.exceptions import BackfillError, DatabaseError
from fiscal_ledger.services.migration.company_entities.transaction_backfiller import (
    BackfillFailureMode,
    TransactionBackfiller,
)
from tests.helpers import FakeSession, InMemoryLedger, make_transaction


@pytest.fixture
def repository():
    repo = Mock()
    repo.session = FakeSession()
    repo.link_entity = AsyncMock(return_value=True)
    return repo


class TestBackfill:

    @pytest.mark.asyncio
    async def test_links_unlinked_transaction(self, repository):
        tx = make_transaction()
        entity_id = uuid4()

        result = await TransactionBackfiller(repository).backfill(tx, entity_id)

        assert result is True
        repository.link_entity.assert_awaited_once_with(tx.id, entity_id)

    @pytest.mark.asyncio
    async def test_accepts_string_entity_id(self, repository):
        tx = make_transaction()
        entity_id = uuid4()

        result = await TransactionBackfiller(repository).backfill(tx, str(entity_id))

        assert result is True
        repository.link_entity.assert_awaited_once_with(tx.id, entity_id)

    @pytest.mark.asyncio
    async def test_already_linked_is_left_alone(self, repository):
        tx = make_transaction(company_id=uuid4())

        result = await TransactionBackfiller(repository).backfill(tx, uuid4())

        assert result is False
        repository.link_entity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_transaction_id_is_skipped(self, repository):
        tx = make_transaction(id=None)

        assert await TransactionBackfiller(repository).backfill(tx, uuid4()) is False
        repository.link_entity.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity_id", [None, "", "not-a-uuid", 42])
    async def test_malformed_entity_id_is_skipped(self, repository, entity_id):
        result = await TransactionBackfiller(repository).backfill(make_transaction(), entity_id)

        assert result is False
        repository.link_entity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_row_not_found_reports_no_update(self, repository):
        repository.link_entity.return_value = False

        assert await TransactionBackfiller(repository).backfill(make_transaction(), uuid4()) is False

    @pytest.mark.asyncio
    async def test_second_backfill_is_a_noop(self):
        tx = make_transaction()
        ledger = InMemoryLedger([tx])
        backfiller = TransactionBackfiller(ledger.transaction_repository(FakeSession(ledger)))
        entity_id = uuid4()

        first = await backfiller.backfill(tx, entity_id)
        second = await backfiller.backfill(tx, entity_id)

        assert (first, second) == (True, False)
        assert [w for w in ledger.writes if w[0] == "link"] == [("link", tx.id, entity_id)]
        assert tx.company_id == entity_id
        assert tx.company_cnpj is None
        assert tx.company_name is None
        assert tx.company_seller_name is None


class TestFailureModes:

    @pytest.mark.asyncio
    async def test_fatal_mode_raises_backfill_error(self, repository):
        cause = DatabaseError("connection lost")
        repository.link_entity.side_effect = cause
        tx = make_transaction()
        entity_id = uuid4()

        with pytest.raises(BackfillError) as exc_info:
            await TransactionBackfiller(repository).backfill(
                tx, entity_id, BackfillFailureMode.FATAL
            )

        assert exc_info.value.original_error is cause
        assert exc_info.value.transaction_id == tx.id
        assert exc_info.value.entity_id == entity_id

    @pytest.mark.asyncio
    async def test_soft_mode_logs_and_returns_false(self, repository):
        repository.link_entity.side_effect = DatabaseError("connection lost")

        result = await TransactionBackfiller(repository).backfill(
            make_transaction(), uuid4(), BackfillFailureMode.SOFT
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_soft_mode_runs_inside_a_savepoint(self, repository):
        await TransactionBackfiller(repository).backfill(
            make_transaction(), uuid4(), BackfillFailureMode.SOFT
        )

        assert repository.session.savepoints == 1
