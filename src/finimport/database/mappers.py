"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from decimal import Decimal

from finimport.domain import entities as domain
from finimport.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Party as ORMParty,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=orm_account.type,
        initial_balance=Decimal(orm_account.initial_balance or 0),
        is_active=bool(orm_account.is_active),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
        type=domain.CategoryType(orm_category.type),
    )


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        name=orm_party.name,
        is_person=bool(orm_party.is_person),
        default_category_id=orm_party.default_category_id,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        account_id=orm_transaction.account_id,
        category_id=orm_transaction.category_id,
        party_id=orm_transaction.party_id,
        is_cleared=bool(orm_transaction.is_cleared),
        related_transaction_id=orm_transaction.related_transaction_id,
    )
