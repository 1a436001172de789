"""Fakes and factories shared by the migration tests."""

import copy
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from unittest.mock import patch
from uuid import uuid4

from fiscal_ledger.database.models import Company, Person, Transaction
from fiscal_ledger.utils.document_validators import format_cpf

ENGINE = "fiscal_ledger.services.migration.company_entities"

VALID_CNPJ = "11.222.333/0001-81"
VALID_CNPJ_DIGITS = "11222333000181"
SECOND_VALID_CNPJ = "12.345.678/0001-92"
VALID_CPF = "529.982.247-25"
VALID_CPF_DIGITS = "52998224725"
ANONYMIZED_CPF = "123.***.*89-12"


def make_transaction(**overrides) -> Transaction:
    """Build a transient Transaction with an ID and no link."""
    fields = {
        "id": uuid4(),
        "description": "Compra de material",
        "total_value": "150.00",
        "transaction_type": "debit",
        "company_cnpj": VALID_CNPJ,
        "company_name": "Acme",
        "company_seller_name": None,
        "company_id": None,
    }
    fields.update(overrides)
    return Transaction(**fields)


class InMemoryLedger:
    """In-memory stand-in for the transactions, companies and persons tables.

    ``fail_on`` maps an operation name (``find_company``, ``insert_company``,
    ``find_person``, ``insert_person``, ``link``) to an exception raised
    whenever that operation runs.
    """

    def __init__(self, transactions: Optional[List[Transaction]] = None):
        self.transactions: List[Transaction] = list(transactions or [])
        self.companies: List[Company] = []
        self.persons: List[Person] = []
        self.writes: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}

    def check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "companies": list(self.companies),
            "persons": list(self.persons),
            "writes": list(self.writes),
            "transactions": [
                (t, t.company_id, t.company_cnpj, t.company_name, t.company_seller_name)
                for t in self.transactions
            ],
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self.companies = state["companies"]
        self.persons = state["persons"]
        self.writes = state["writes"]
        for t, company_id, cnpj, name, seller in state["transactions"]:
            t.company_id = company_id
            t.company_cnpj = cnpj
            t.company_name = name
            t.company_seller_name = seller

    # Factories with the repositories' constructor signature
    def company_repository(self, session):
        return FakeCompanyRepository(self, session)

    def person_repository(self, session):
        return FakePersonRepository(self, session)

    def transaction_repository(self, session):
        return FakeTransactionRepository(self, session)


class FakeCompanyRepository:
    def __init__(self, ledger: InMemoryLedger, session):
        self.ledger = ledger
        self.session = session

    async def find_by_cnpj(self, cnpj: str) -> Optional[Company]:
        self.ledger.check("find_company")
        return next((c for c in self.ledger.companies if c.company_cnpj == cnpj), None)

    async def insert(self, payload: Dict[str, Any]) -> Optional[Company]:
        self.ledger.check("insert_company")
        company = Company(id=uuid4(), **copy.deepcopy(payload))
        self.ledger.companies.append(company)
        self.ledger.writes.append(("insert_company", company.company_cnpj))
        return company


class FakePersonRepository:
    def __init__(self, ledger: InMemoryLedger, session):
        self.ledger = ledger
        self.session = session

    async def find_by_cpf(self, cpf: str) -> Optional[Person]:
        self.ledger.check("find_person")
        candidates = {cpf, format_cpf(cpf)}
        return next((p for p in self.ledger.persons if p.cpf in candidates), None)

    async def find_by_raw_cpf(self, cpf: str) -> Optional[Person]:
        self.ledger.check("find_person")
        return next((p for p in self.ledger.persons if p.cpf == cpf), None)

    async def insert(self, payload: Dict[str, Any]) -> Optional[Person]:
        self.ledger.check("insert_person")
        person = Person(id=uuid4(), **copy.deepcopy(payload))
        self.ledger.persons.append(person)
        self.ledger.writes.append(("insert_person", person.cpf))
        return person


class FakeTransactionRepository:
    def __init__(self, ledger: InMemoryLedger, session):
        self.ledger = ledger
        self.session = session

    async def find_all_with_company_cnpj(self) -> List[Transaction]:
        return [
            t for t in self.ledger.transactions
            if t.company_cnpj is not None and t.company_cnpj.strip() != ""
        ]

    async def link_entity(self, transaction_id, entity_id) -> bool:
        self.ledger.check("link")
        for t in self.ledger.transactions:
            if t.id == transaction_id:
                t.company_id = entity_id
                t.company_name = None
                t.company_seller_name = None
                t.company_cnpj = None
                self.ledger.writes.append(("link", transaction_id, entity_id))
                return True
        return False


class FakeTransaction:
    """Async context manager mimicking ``session.begin()``/``begin_nested()``."""

    def __init__(self, session: "FakeSession", nested: bool):
        self.session = session
        self.nested = nested
        self.state = None

    async def __aenter__(self):
        if self.session.ledger is not None:
            self.state = self.session.ledger.snapshot()
        if self.nested:
            self.session.savepoints += 1
        else:
            self.session.begin_calls += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            if self.session.ledger is not None:
                self.session.ledger.restore(self.state)
            if not self.nested:
                self.session.rolled_back = True
            return False
        if not self.nested:
            self.session.committed = True
        return False


class FakeSession:
    """Records the transaction boundary the migration drives."""

    def __init__(self, ledger: Optional[InMemoryLedger] = None):
        self.ledger = ledger
        self.begin_calls = 0
        self.savepoints = 0
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def in_transaction(self) -> bool:
        return False

    async def commit(self) -> None:
        pass

    def begin(self) -> FakeTransaction:
        return FakeTransaction(self, nested=False)

    def begin_nested(self) -> FakeTransaction:
        return FakeTransaction(self, nested=True)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


@contextmanager
def patch_repositories(ledger: InMemoryLedger):
    """Swap every repository the engine builds for the ledger's fakes."""
    with patch(f"{ENGINE}.migration_service.TransactionRepository", new=ledger.transaction_repository), \
         patch(f"{ENGINE}.base_resolver.TransactionRepository", new=ledger.transaction_repository), \
         patch(f"{ENGINE}.company_resolver.CompanyRepository", new=ledger.company_repository), \
         patch(f"{ENGINE}.person_resolver.PersonRepository", new=ledger.person_repository), \
         patch(f"{ENGINE}.anonymous_person_resolver.PersonRepository", new=ledger.person_repository):
        yield ledger
