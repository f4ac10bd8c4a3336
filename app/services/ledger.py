# app/services/ledger.py
#
# Balance ledger
# Keeps every account's stored balance equal to the signed sum of its
# transactions. Each public operation is one atomic unit: the transaction row
# and the account balance(s) are committed together or rolled back together.

"""
Ledger operations used by the transaction routes and the CSV importer.

Public API:
    signed_contribution(kind, amount) -> Decimal
    create_transaction(db, identity, data) -> Transaction
    update_transaction(db, identity, transaction_id, data) -> Transaction
    delete_transaction(db, identity, transaction_id) -> None

Balances are never written back from Python. Every change is applied in SQL
as UPDATE accounts SET balance = balance + :delta, so two units touching the
same account cannot overwrite each other. Accounts read for the overdraft
check are locked with SELECT ... FOR UPDATE, in id order; on SQLite the unit
already holds the database write lock from BEGIN IMMEDIATE (see db.py).

The CHECK (balance >= 0) constraint on accounts rejects any delta that would
overdraw, whatever the unit read earlier: the unit rolls back and surfaces as
an insufficient-balance validation error. Other integrity errors (a category
or account deleted mid-unit) roll back as a conflict.
"""

from decimal import Decimal
from typing import Dict, Iterable

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.deps import CurrentUser
from app.errors import ConflictError, InsufficientBalanceError, NotFoundError, ValidationError
from app.logging_utils import get_logger
from app.schemas import TransactionCreate, TransactionUpdate
from models import BALANCE_CHECK, EXPENSE, INCOME, Account, Category, Transaction

logger = get_logger(__name__)

# Fields whose change moves money between balances
LEDGER_FIELDS = ("amount", "kind", "account_id")


def signed_contribution(kind: str, amount: Decimal) -> Decimal:
    """+amount for income, -amount for expense."""
    if kind == INCOME:
        return Decimal(amount)
    if kind == EXPENSE:
        return -Decimal(amount)
    raise ValueError(f"Unknown transaction kind: {kind!r}")


# ---- Lookups ----

def _active_category(db: Session, master_account_id: str, category_id: str) -> Category:
    category = (
        db.query(Category)
        .filter(
            Category.id == category_id,
            Category.master_account_id == master_account_id,
            Category.is_active.is_(True),
        )
        .one_or_none()
    )
    if category is None:
        raise NotFoundError("Category not found or inactive")
    return category


def _ensure_active_account(db: Session, master_account_id: str, account_id: str) -> None:
    exists = (
        db.query(Account.id)
        .filter(
            Account.id == account_id,
            Account.master_account_id == master_account_id,
            Account.is_active.is_(True),
        )
        .first()
    )
    if exists is None:
        raise NotFoundError("Account not found or inactive")


def _lock_accounts(db: Session, account_ids: Iterable[str]) -> Dict[str, Account]:
    """Row-lock the given accounts (sorted, to keep a stable lock order)."""
    ids = sorted(set(account_ids))
    rows = (
        db.query(Account)
        .filter(Account.id.in_(ids))
        .order_by(Account.id)
        .with_for_update()
        .populate_existing()
        .all()
    )
    return {account.id: account for account in rows}


def _check_kind(category: Category, kind: str) -> None:
    if category.kind != kind:
        raise ValidationError("Transaction kind does not match category kind")


def _get_transaction(db: Session, identity: CurrentUser, transaction_id: str) -> Transaction:
    """Lock and reload the row whose old contribution is about to be reverted."""
    tx = (
        db.query(Transaction)
        .filter(
            Transaction.id == transaction_id,
            Transaction.master_account_id == identity.master_account_id,
        )
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if tx is None:
        raise NotFoundError("Transaction not found")
    return tx


def _apply_delta(db: Session, account_id: str, delta: Decimal) -> None:
    """Move an account's balance by delta in SQL; the CHECK constraint guards the floor."""
    if delta == 0:
        return
    db.execute(
        update(Account)
        .where(Account.id == account_id)
        # SQLite keeps NUMERIC as REAL; round back to cents
        .values(balance=func.round(Account.balance + delta, 2))
        .execution_options(synchronize_session=False)
    )


def _reject(db: Session, exc: IntegrityError) -> None:
    """Roll back a unit refused by the store."""
    db.rollback()
    if BALANCE_CHECK in str(exc.orig):
        logger.warning("Ledger operation would overdraw an account: %s", exc.orig)
        raise InsufficientBalanceError("Account balance cannot go negative") from exc

    logger.warning("Ledger operation rejected by store constraints: %s", exc.orig)
    raise ConflictError("The transaction conflicts with stored data; reload and retry") from exc


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        _reject(db, exc)


# -------------------------------------------------------------------
# Operations
# -------------------------------------------------------------------

def create_transaction(db: Session, identity: CurrentUser, data: TransactionCreate) -> Transaction:
    tenant = identity.master_account_id
    amount = Decimal(data.amount)

    try:
        category = _active_category(db, tenant, data.category_id)
        _check_kind(category, data.kind)
        _ensure_active_account(db, tenant, data.account_id)

        account = _lock_accounts(db, [data.account_id])[data.account_id]
        if data.kind == EXPENSE and account.balance < amount:
            raise InsufficientBalanceError()

        delta = signed_contribution(data.kind, amount)
        _apply_delta(db, data.account_id, delta)

        tx = Transaction(
            master_account_id=tenant,
            user_id=identity.user_id,
            kind=data.kind,
            amount=amount,
            category_id=data.category_id,
            account_id=data.account_id,
            date=data.date,
            notes=data.notes,
            receipt_url=str(data.receipt_url) if data.receipt_url else None,
        )
        db.add(tx)
        db.flush()
    except IntegrityError as exc:
        _reject(db, exc)
    except Exception:
        db.rollback()
        raise

    _commit(db)
    logger.info("Created %s transaction %s on account %s (delta %s)", tx.kind, tx.id, tx.account_id, delta)
    return tx


def update_transaction(
    db: Session,
    identity: CurrentUser,
    transaction_id: str,
    data: TransactionUpdate,
) -> Transaction:
    """
    Apply a partial update.

    When amount, kind or account changes, the old contribution is reverted on
    the old account and the new one applied on the (possibly different) new
    account inside the same unit; if the new expense would overdraw the new
    account nothing is persisted, the reversal included.
    """
    tenant = identity.master_account_id
    changes = data.changes()

    try:
        tx = _get_transaction(db, identity, transaction_id)
        new_kind = changes.get("kind", tx.kind)

        if "category_id" in changes:
            category = _active_category(db, tenant, changes["category_id"])
            _check_kind(category, new_kind)
        elif "kind" in changes:
            _check_kind(tx.category, new_kind)

        if "account_id" in changes:
            _ensure_active_account(db, tenant, changes["account_id"])

        if any(name in changes for name in LEDGER_FIELDS):
            old_account_id = tx.account_id
            new_account_id = changes.get("account_id", old_account_id)
            new_amount = Decimal(changes.get("amount", tx.amount))

            # Net change per account; on the same account revert and re-apply collapse into one delta
            deltas: Dict[str, Decimal] = {old_account_id: -signed_contribution(tx.kind, tx.amount)}
            deltas[new_account_id] = deltas.get(new_account_id, Decimal("0")) + signed_contribution(
                new_kind, new_amount
            )

            accounts = _lock_accounts(db, deltas)
            if new_kind == EXPENSE and accounts[new_account_id].balance + deltas[new_account_id] < 0:
                raise InsufficientBalanceError()

            for account_id in sorted(deltas):
                _apply_delta(db, account_id, deltas[account_id])

            logger.info(
                "Moving transaction %s: %s %s on %s -> %s %s on %s",
                tx.id, tx.kind, tx.amount, old_account_id,
                new_kind, new_amount, new_account_id,
            )

        for name, value in changes.items():
            setattr(tx, name, value)
        db.flush()
    except IntegrityError as exc:
        _reject(db, exc)
    except Exception:
        db.rollback()
        raise

    _commit(db)
    # Foreign keys may have moved; reload the related rows on next access
    db.expire(tx, ["category", "account"])
    return tx


def delete_transaction(db: Session, identity: CurrentUser, transaction_id: str) -> None:
    try:
        tx = _get_transaction(db, identity, transaction_id)
        account_id = tx.account_id

        _apply_delta(db, account_id, -signed_contribution(tx.kind, tx.amount))

        db.delete(tx)
        db.flush()
    except IntegrityError as exc:
        _reject(db, exc)
    except Exception:
        db.rollback()
        raise

    _commit(db)
    logger.info("Deleted transaction %s from account %s", transaction_id, account_id)
