# models.py
# Role: SQLAlchemy ORM models for the finance API.
#       Master accounts (tenants) own users, financial accounts, categories
#       and transactions. Check constraints keep balances non-negative and
#       transaction amounts positive.

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from db import Base

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_KINDS = (INCOME, EXPENSE)

READ = "read"
WRITE = "write"
PERMISSIONS = (READ, WRITE)

# Two decimal places, enough for household amounts
MONEY = Numeric(12, 2)

# Name of the accounts CHECK that keeps balances non-negative
BALANCE_CHECK = "ck_accounts_balance_non_negative"


def new_id() -> str:
    return uuid.uuid4().hex


class TimestampMixin:
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class MasterAccount(TimestampMixin, Base):
    """
    Tenant that owns everything else.

    Deleting a master account cascades to its users, accounts, categories
    and transactions at the database level.
    """

    __tablename__ = "master_accounts"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    admin_email = Column(String, nullable=False, unique=True)
    settings = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)

    users = relationship("User", back_populates="master_account", passive_deletes=True)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("master_account_id", "email", name="uq_users_master_account_email"),
        CheckConstraint("length(email) > 0", name="ck_users_email_not_empty"),
        CheckConstraint("permission IN ('read', 'write')", name="ck_users_permission"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    master_account_id = Column(
        String(32),
        ForeignKey("master_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    permission = Column(String(10), nullable=False, default=READ)
    is_active = Column(Boolean, nullable=False, default=True)
    password_hash = Column(String, nullable=False)

    master_account = relationship("MasterAccount", back_populates="users")


class Account(TimestampMixin, Base):
    """
    A balance-holding financial account (cash, bank, savings...).

    The stored balance is only changed by explicit edits or by the ledger
    (app/services/ledger.py) as a side effect of transaction mutations.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name=BALANCE_CHECK),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    master_account_id = Column(
        String(32),
        ForeignKey("master_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    type = Column(String, nullable=False, default="cash")
    color = Column(String, nullable=False, default="#3B82F6")
    icon = Column(String, nullable=False, default="Wallet")
    is_active = Column(Boolean, nullable=False, default=True)


class Category(TimestampMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("kind IN ('income', 'expense')", name="ck_categories_kind"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    master_account_id = Column(
        String(32),
        ForeignKey("master_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    kind = Column(String(10), nullable=False)
    icon = Column(String, nullable=False, default="Tag")
    color = Column(String, nullable=False, default="blue")
    is_active = Column(Boolean, nullable=False, default=True)


class Transaction(TimestampMixin, Base):
    """
    A single income or expense movement on one account.

    Invariants (enforced by the ledger and the table constraints):
    - amount > 0
    - kind matches the referenced category's kind
    - an expense never drives its account's balance below zero
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint("kind IN ('income', 'expense')", name="ck_transactions_kind"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    master_account_id = Column(
        String(32),
        ForeignKey("master_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # History survives the removal of the user who recorded it
    user_id = Column(
        String(32),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    kind = Column(String(10), nullable=False)
    amount = Column(MONEY, nullable=False)
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)
    account_id = Column(String(32), ForeignKey("accounts.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    receipt_url = Column(String, nullable=True)

    category = relationship("Category")
    account = relationship("Account")
