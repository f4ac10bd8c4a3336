# routes_transactions.py
"""
Routes for income / expense transactions.

Reads are plain filtered queries; every mutation is delegated to the ledger
(app/services/ledger.py) so account balances move together with the rows.
"""

import math
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.deps import CurrentUser, get_db, require_read, require_write
from app.errors import NotFoundError
from app.responses import serialize_transaction, success_response
from app.schemas import TransactionCreate, TransactionUpdate
from app.services import ledger
from models import Transaction

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _with_relations(query):
    return query.options(joinedload(Transaction.category), joinedload(Transaction.account))


@router.get("")
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    kind: Optional[Literal["income", "expense"]] = Query(None),
    category_id: Optional[str] = Query(None),
    account_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    order: Literal["asc", "desc"] = Query("desc"),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    # Base query, always scoped to the caller's master account
    query = db.query(Transaction).filter(Transaction.master_account_id == current.master_account_id)

    if kind:
        query = query.filter(Transaction.kind == kind)
    if category_id:
        query = query.filter(Transaction.category_id == category_id)
    if account_id:
        query = query.filter(Transaction.account_id == account_id)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)

    total = query.count()

    sort_col = Transaction.date.asc() if order == "asc" else Transaction.date.desc()
    transactions = (
        _with_relations(query)
        .order_by(sort_col, Transaction.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return success_response(
        {
            "transactions": [serialize_transaction(t) for t in transactions],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit),
            },
        },
        "Transactions retrieved",
    )


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: str,
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    tx = (
        _with_relations(db.query(Transaction))
        .filter(
            Transaction.id == transaction_id,
            Transaction.master_account_id == current.master_account_id,
        )
        .one_or_none()
    )
    if tx is None:
        raise NotFoundError("Transaction not found")

    return success_response(serialize_transaction(tx), "Transaction retrieved")


@router.post("")
def create_transaction(
    payload: TransactionCreate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    tx = ledger.create_transaction(db, current, payload)
    return success_response(serialize_transaction(tx), "Transaction created")


@router.patch("/{transaction_id}")
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    tx = ledger.update_transaction(db, current, transaction_id, payload)
    return success_response(serialize_transaction(tx), "Transaction updated")


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: str,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    ledger.delete_transaction(db, current, transaction_id)
    return success_response(None, "Transaction deleted")
