"""Repository for company data access."""

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from fiscal_ledger.database.models import Company
from fiscal_ledger.repositories.base_repository import BaseRepository
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company model.

    Companies are keyed by ``company_cnpj`` exactly as it was written on
    the source transaction.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the company repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Company)

    async def find_by_cnpj(self, cnpj: str) -> Optional[Company]:
        """Get a company by its CNPJ.

        Args:
            cnpj: CNPJ string as stored

        Returns:
            Company if found, None otherwise
        """
        try:
            query = select(Company).where(Company.company_cnpj == cnpj)
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error getting company by CNPJ: {e}",
                extra={"company_cnpj": cnpj},
                exc_info=True
            )
            raise

    async def insert(self, payload: Dict[str, Any]) -> Optional[Company]:
        """Insert a company built from an adapter payload.

        Args:
            payload: Column values for the new company

        Returns:
            The flushed company
        """
        return await self.create(**payload)
