"""SQLAlchemy models for finimport database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Date,
    Numeric,
    Boolean,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    initial_balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")


class Category(Base):
    """Category model.

    ``type`` holds one of INCOME, EXPENSE or TRANSFER.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    type = Column(String, nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    transactions = relationship("Transaction", back_populates="category")


class Party(Base):
    """Counterparty model."""

    __tablename__ = "party"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    is_person = Column(Boolean, default=False, nullable=False)
    default_category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    # Relationships
    default_category = relationship("Category")
    transactions = relationship("Transaction", back_populates="party")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    party_id = Column(Integer, ForeignKey("party.id"), nullable=True)
    is_cleared = Column(Boolean, default=False, nullable=False)
    related_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
    party = relationship("Party", back_populates="transactions")

