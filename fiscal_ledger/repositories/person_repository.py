"""Repository for person data access."""

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from fiscal_ledger.database.models import Person
from fiscal_ledger.repositories.base_repository import BaseRepository
from fiscal_ledger.utils.document_validators import format_cpf
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PersonRepository(BaseRepository[Person]):
    """Repository for Person model, covering anonymous persons too."""

    def __init__(self, session: AsyncSession):
        """Initialize the person repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Person)

    async def find_by_cpf(self, cpf: str) -> Optional[Person]:
        """Get a person by CPF.

        Persons are stored with a formatted CPF while transactions may carry
        the bare digits, so both spellings are matched. Only for valid CPFs;
        masked ones go through ``find_by_raw_cpf``.

        Args:
            cpf: CPF as written on the transaction

        Returns:
            Person if found, None otherwise
        """
        candidates = {cpf, format_cpf(cpf)}
        try:
            query = (
                select(Person)
                .where(Person.cpf.in_(candidates))
                .order_by(Person.created_at)
                .limit(1)
            )
            result = await self.session.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error getting person by CPF: {e}",
                extra={"cpf": cpf},
                exc_info=True
            )
            raise

    async def find_by_raw_cpf(self, cpf: str) -> Optional[Person]:
        """Get a person whose stored CPF equals ``cpf`` exactly.

        Anonymous persons are keyed by the masked string as written, so no
        formatted spelling is tried.

        Args:
            cpf: CPF as written on the transaction

        Returns:
            Person if found, None otherwise
        """
        try:
            query = (
                select(Person)
                .where(Person.cpf == cpf)
                .order_by(Person.created_at)
                .limit(1)
            )
            result = await self.session.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error getting person by raw CPF: {e}",
                extra={"cpf": cpf},
                exc_info=True
            )
            raise

    async def insert(self, payload: Dict[str, Any]) -> Optional[Person]:
        """Insert a person built from an adapter payload.

        Args:
            payload: Column values for the new person

        Returns:
            The flushed person
        """
        return await self.create(**payload)
