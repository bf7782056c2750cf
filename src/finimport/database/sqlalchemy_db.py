"""Generic SQLAlchemy database implementation."""

import logging
from typing import Optional, Any, Iterable
from datetime import date
from decimal import Decimal
from sqlalchemy import create_engine, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from finimport.database.base import Database
from finimport.database.models import (
    Base,
    Account,
    Category,
    Party,
    Transaction,
)
from finimport.database.mappers import (
    account_to_domain,
    category_to_domain,
    party_to_domain,
    transaction_to_domain,
)
from finimport.domain.entities import (
    Account as DomainAccount,
    Category as DomainCategory,
    CategoryType,
    Party as DomainParty,
    Transaction as DomainTransaction,
    TransactionCandidate,
)
from finimport.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.engine = create_engine(database_url, echo=False)
        self.session_factory = sessionmaker(bind=self.engine)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self.engine.dispose()

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        Base.metadata.create_all(self.engine)

    # Account operations
    def create_account(self, name: str, account_type: str, initial_balance: Decimal = Decimal("0")) -> int:
        """Create a new account. Returns account ID."""
        session = self._get_session()
        account = Account(name=name, type=account_type, initial_balance=initial_balance)
        session.add(account)
        session.commit()
        return account.id

    def get_account_by_name(self, name: str) -> Optional[DomainAccount]:
        """Get account by exact name."""
        session = self._get_session()
        account = session.query(Account).filter(Account.name == name).first()
        if account is None:
            return None
        return account_to_domain(account)

    def list_accounts(self) -> list[DomainAccount]:
        """List all accounts."""
        session = self._get_session()
        accounts = session.query(Account).order_by(Account.name).all()
        return [account_to_domain(acc) for acc in accounts]

    # Category operations
    def seed_categories(self, categories: Iterable[tuple[str, CategoryType]]) -> int:
        """Insert categories whose name does not exist yet. Returns number inserted."""
        session = self._get_session()
        existing = {name for (name,) in session.query(Category.name).all()}
        inserted = 0
        for name, category_type in categories:
            if name in existing:
                continue
            session.add(Category(name=name, type=CategoryType(category_type).value))
            existing.add(name)
            inserted += 1
        session.commit()
        return inserted

    def get_category_by_name(self, name: str) -> Optional[DomainCategory]:
        """Get category by name."""
        session = self._get_session()
        cat = session.query(Category).filter(Category.name == name).first()
        if cat is None:
            return None
        return category_to_domain(cat)

    def list_categories(self) -> list[DomainCategory]:
        """List all categories ordered by name."""
        session = self._get_session()
        categories = session.query(Category).order_by(Category.name).all()
        return [category_to_domain(cat) for cat in categories]

    # Party operations
    def get_party_by_name(self, name: str) -> Optional[DomainParty]:
        """Get party by name."""
        session = self._get_session()
        party = session.query(Party).filter(Party.name == name).first()
        if party is None:
            return None
        return party_to_domain(party)

    def list_parties(self) -> list[DomainParty]:
        """List all parties ordered by name."""
        session = self._get_session()
        parties = session.query(Party).order_by(Party.name).all()
        return [party_to_domain(p) for p in parties]

    def create_party(
        self, name: str, default_category_id: Optional[int], is_person: bool = False
    ) -> int:
        """Create a party. Returns party ID."""
        session = self._get_session()
        party = Party(name=name, default_category_id=default_category_id, is_person=is_person)
        session.add(party)
        session.commit()
        return party.id

    def update_party_default_category(self, party_id: int, category_id: Optional[int]) -> None:
        """Change the default category of a party."""
        session = self._get_session()
        party = session.query(Party).filter(Party.id == party_id).first()
        if party is None:
            raise ValueError(f"Party {party_id} not found")
        party.default_category_id = category_id
        session.commit()

    # Transaction operations
    def _get_or_create_party(self, session: Session, name: str, fallback_category_id: int) -> Party:
        """Find a party by name inside the current unit of work, adding it if absent."""
        party = session.query(Party).filter(Party.name == name).first()
        if party is None:
            party = Party(name=name, default_category_id=fallback_category_id)
            session.add(party)
            session.flush()
        return party

    def insert_transaction_batch(
        self, candidates: Iterable[TransactionCandidate], fallback_category_id: int
    ) -> int:
        """Insert candidates as one atomic unit. Returns number inserted."""
        session = self._get_session()
        inserted = 0
        try:
            for candidate in candidates:
                party = self._get_or_create_party(session, candidate.party_name, fallback_category_id)

                if candidate.category_id is not None:
                    category_id = candidate.category_id
                elif party.default_category_id is not None:
                    category_id = party.default_category_id
                else:
                    category_id = fallback_category_id

                session.add(
                    Transaction(
                        date=candidate.date,
                        description=candidate.description,
                        amount=candidate.amount,
                        account_id=candidate.account_id,
                        category_id=category_id,
                        party_id=party.id,
                    )
                )
                inserted += 1
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Batch insert rolled back after %d pending rows: %s", inserted, e)
            raise PersistenceError(
                f"Batch insert failed, no rows were saved ({e.__class__.__name__})"
            ) from e
        except Exception:
            session.rollback()
            raise
        return inserted

    def list_transactions(self, account_id: Optional[int] = None) -> list[DomainTransaction]:
        """List transactions, newest first."""
        session = self._get_session()
        query = session.query(Transaction)
        if account_id is not None:
            query = query.filter(Transaction.account_id == account_id)
        transactions = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
        return [transaction_to_domain(txn) for txn in transactions]

    # Reporting queries
    def get_transaction_listing(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """List transactions joined with account, category and party names."""
        session = self._get_session()
        query = (
            session.query(
                Transaction,
                Account.name.label("account_name"),
                Category.name.label("category_name"),
                Category.type.label("category_type"),
                Party.name.label("party_name"),
            )
            .join(Account, Transaction.account_id == Account.id)
            .join(Category, Transaction.category_id == Category.id)
            .outerjoin(Party, Transaction.party_id == Party.id)
        )

        if start_date is not None:
            query = query.filter(Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.date < end_date)

        rows = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
        return [
            {
                "id": txn.id,
                "date": txn.date,
                "amount": float(txn.amount),
                "description": txn.description,
                "account_name": account_name,
                "category_name": category_name,
                "category_type": category_type,
                "party_name": party_name,
            }
            for txn, account_name, category_name, category_type, party_name in rows
        ]

    def get_category_totals(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sign: int = 0,
        include_transfers: bool = False,
    ) -> list[dict[str, Any]]:
        """Sum amounts per category name."""
        session = self._get_session()
        query = session.query(
            Category.name.label("name"),
            func.sum(Transaction.amount).label("total"),
        ).join(Category, Transaction.category_id == Category.id)

        if start_date is not None:
            query = query.filter(Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.date < end_date)
        if sign > 0:
            query = query.filter(Transaction.amount > 0)
        elif sign < 0:
            query = query.filter(Transaction.amount < 0)
        if not include_transfers:
            query = query.filter(Category.type != CategoryType.TRANSFER.value)

        results = query.group_by(Category.name).all()
        return [{"name": r.name, "total": float(r.total or 0)} for r in results]
