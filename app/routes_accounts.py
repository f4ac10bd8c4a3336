# routes_accounts.py
"""
Routes for financial accounts (cash, bank, savings...).

Balances are edited directly only here; every other balance change goes
through the ledger as a side effect of a transaction mutation.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.deps import CurrentUser, get_db, require_read, require_write
from app.errors import ConflictError, NotFoundError
from app.logging_utils import get_logger
from app.responses import serialize_account, success_response
from app.schemas import AccountCreate, AccountUpdate
from models import Account

router = APIRouter(prefix="/accounts", tags=["accounts"])

logger = get_logger(__name__)


def _get_account(db: Session, current: CurrentUser, account_id: str) -> Account:
    account = (
        db.query(Account)
        .filter(Account.id == account_id, Account.master_account_id == current.master_account_id)
        .one_or_none()
    )
    if account is None:
        raise NotFoundError("Account not found")
    return account


def _ensure_unique_name(db: Session, current: CurrentUser, name: str, exclude_id: str | None = None) -> None:
    query = db.query(Account.id).filter(
        Account.name == name,
        Account.master_account_id == current.master_account_id,
    )
    if exclude_id:
        query = query.filter(Account.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("An account with this name already exists")


@router.get("")
def list_accounts(
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    accounts = (
        db.query(Account)
        .filter(Account.master_account_id == current.master_account_id)
        .order_by(Account.created_at, Account.name)
        .all()
    )
    return success_response([serialize_account(a) for a in accounts], "Accounts retrieved")


@router.get("/{account_id}")
def get_account(
    account_id: str,
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    return success_response(serialize_account(_get_account(db, current, account_id)), "Account retrieved")


@router.post("")
def create_account(
    payload: AccountCreate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    _ensure_unique_name(db, current, payload.name)

    account = Account(
        master_account_id=current.master_account_id,
        name=payload.name,
        balance=payload.balance,
        type=payload.type,
        color=payload.color,
        icon=payload.icon,
        is_active=True,
    )
    db.add(account)
    db.commit()
    db.refresh(account)

    return success_response(serialize_account(account), "Account created")


@router.patch("/{account_id}")
def update_account(
    account_id: str,
    payload: AccountUpdate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    account = _get_account(db, current, account_id)
    changes = payload.changes()

    if "name" in changes:
        _ensure_unique_name(db, current, changes["name"], exclude_id=account.id)

    if "balance" in changes:
        logger.info("Manual balance edit on account %s: %s -> %s", account.id, account.balance, changes["balance"])

    for name, value in changes.items():
        setattr(account, name, value)
    db.commit()
    db.refresh(account)

    return success_response(serialize_account(account), "Account updated")


@router.delete("/{account_id}")
def delete_account(
    account_id: str,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    account = _get_account(db, current, account_id)

    try:
        db.delete(account)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("The account has transactions; deactivate it instead")

    return success_response(None, "Account deleted")
