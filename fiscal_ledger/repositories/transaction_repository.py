"""Repository for transaction data access."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from fiscal_ledger.database.models import Transaction
from fiscal_ledger.repositories.base_repository import BaseRepository
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model.

    Besides the generic CRUD inherited from BaseRepository, exposes the
    queries the entity migration needs: listing transactions that still
    embed a counterparty document and linking them to a canonical entity.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the transaction repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Transaction)

    async def find_all_with_company_cnpj(self) -> List[Transaction]:
        """Get every transaction holding a non-blank ``company_cnpj``.

        Returns:
            Transactions ordered by creation time, then ID
        """
        try:
            query = (
                select(Transaction)
                .where(
                    Transaction.company_cnpj.is_not(None),
                    func.trim(Transaction.company_cnpj) != "",
                )
                .order_by(Transaction.created_at, Transaction.id)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error listing transactions with company document: {e}",
                exc_info=True
            )
            raise

    async def update_by_id(
        self,
        transaction_id: UUID,
        patch: Dict[str, Any]
    ) -> Optional[Transaction]:
        """Apply a column patch to one transaction.

        Args:
            transaction_id: Transaction UUID
            patch: Column values to set

        Returns:
            The updated transaction, or None if it does not exist
        """
        return await self.update(transaction_id, **patch)

    async def link_entity(self, transaction_id: UUID, entity_id: UUID) -> bool:
        """Point a transaction at its canonical entity.

        Sets ``company_id`` and clears the embedded counterparty columns.

        Args:
            transaction_id: Transaction UUID
            entity_id: Company or person UUID

        Returns:
            True if the transaction exists and was updated
        """
        updated = await self.update_by_id(
            transaction_id,
            {
                "company_id": entity_id,
                "company_name": None,
                "company_seller_name": None,
                "company_cnpj": None,
            },
        )
        return updated is not None
