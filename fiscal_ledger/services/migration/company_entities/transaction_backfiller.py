"""Link a transaction to its canonical entity."""

from enum import Enum
from typing import Any, Union
from uuid import UUID

from fiscal_ledger.core.exceptions import BackfillError
from fiscal_ledger.repositories.transaction_repository import TransactionRepository
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BackfillFailureMode(str, Enum):
    """What a storage failure during backfill does to the run.

    FATAL raises BackfillError and aborts the run (company path). SOFT logs
    and reports no update, leaving the freshly created person in place.
    """

    FATAL = "fatal"
    SOFT = "soft"


def _as_uuid(value: Union[UUID, str, None]) -> Union[UUID, None]:
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value)
        except ValueError:
            return None
    return None


class TransactionBackfiller:
    """Replaces a transaction's embedded counterparty with ``company_id``."""

    def __init__(self, transaction_repository: TransactionRepository):
        """Initialize the backfiller.

        Args:
            transaction_repository: Repository bound to the run's session
        """
        self.transaction_repository = transaction_repository

    async def backfill(
        self,
        transaction: Any,
        entity_id: Union[UUID, str, None],
        failure_mode: BackfillFailureMode = BackfillFailureMode.FATAL,
    ) -> bool:
        """Set ``company_id`` and clear the embedded company columns.

        A transaction that is already linked is left untouched, which makes
        re-running the migration safe.

        Args:
            transaction: Transaction to link
            entity_id: ID of the company or person it belongs to
            failure_mode: How to react to a storage error

        Returns:
            True if the transaction was written

        Raises:
            BackfillError: On storage failure in FATAL mode
        """
        transaction_id = getattr(transaction, "id", None)
        if transaction_id is None:
            LOGGER.warning("Transaction has no ID, skipping backfill")
            return False

        if getattr(transaction, "company_id", None) is not None:
            LOGGER.debug(
                "Transaction already linked, skipping backfill",
                extra={"transaction_id": str(transaction_id)}
            )
            return False

        entity_uuid = _as_uuid(entity_id)
        if entity_uuid is None:
            LOGGER.warning(
                f"Invalid entity ID {entity_id!r}, skipping backfill",
                extra={"transaction_id": str(transaction_id)}
            )
            return False

        try:
            linked = await self._link(transaction_id, entity_uuid, failure_mode)
        except Exception as e:
            if failure_mode is BackfillFailureMode.FATAL:
                raise BackfillError(
                    f"Failed to link transaction {transaction_id} to entity {entity_uuid}: {e}",
                    transaction_id=transaction_id,
                    entity_id=entity_uuid,
                    original_error=e,
                ) from e

            LOGGER.error(
                f"Failed to link transaction to entity: {e}",
                extra={
                    "transaction_id": str(transaction_id),
                    "entity_id": str(entity_uuid)
                },
                exc_info=True
            )
            return False

        if not linked:
            LOGGER.warning(
                "Transaction not found while linking",
                extra={"transaction_id": str(transaction_id)}
            )
            return False

        LOGGER.info(
            "Transaction linked to entity",
            extra={
                "transaction_id": str(transaction_id),
                "entity_id": str(entity_uuid)
            }
        )
        return True

    async def _link(
        self,
        transaction_id: UUID,
        entity_id: UUID,
        failure_mode: BackfillFailureMode,
    ) -> bool:
        if failure_mode is BackfillFailureMode.SOFT:
            # Savepoint keeps the outer transaction usable after a failed UPDATE
            async with self.transaction_repository.session.begin_nested():
                return await self.transaction_repository.link_entity(
                    transaction_id, entity_id
                )
        return await self.transaction_repository.link_entity(transaction_id, entity_id)
