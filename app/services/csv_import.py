# csv_import.py
"""
Bulk import of historical transactions from a CSV export.

Expected columns (case-insensitive, surrounding spaces ignored):
    date      YYYY-MM-DD or DD-MM-YYYY
    amount    signed: negative = expense, positive = income
    category  category name (looked up with the kind implied by the sign)
    account   account name
    notes     optional

Each row is posted through the ledger, oldest first, so balances move exactly
as if the transactions had been entered by hand.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Tuple

import pandas as pd
from sqlalchemy.orm import Session

from app.deps import CurrentUser
from app.errors import AppError, NotFoundError
from app.logging_utils import get_logger
from app.schemas import TransactionCreate
from app.services import ledger
from models import EXPENSE, INCOME, Account, Category

logger = get_logger(__name__)

REQUIRED_COLUMNS = {"date", "amount", "category", "account"}


def parse_date(value):
    s = str(value).strip()
    for fmt in ("%Y-%m-%d", "%d-%m-%Y"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {s!r}")


def parse_amount(value) -> Decimal:
    """'1 234,56' / '-50.00' / -50.0 -> Decimal, rounded to cents."""
    if pd.isna(value):
        raise ValueError("Missing amount")
    s = str(value).replace(" ", "").replace("−", "-").replace(",", ".").strip()
    try:
        return Decimal(s).quantize(Decimal("0.01"))
    except InvalidOperation as exc:
        raise ValueError(f"Unrecognised amount: {value!r}") from exc


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def _parse_column(df: pd.DataFrame, column: str, parser) -> list:
    """Parse one column cell by cell, naming the CSV line of the first bad value."""
    values = []
    for value, line in zip(df[column], df["line"]):
        try:
            values.append(parser(value))
        except ValueError as exc:
            raise ValueError(f"Line {line}: {exc}") from exc
    return values


def load_csv(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str)

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{Path(path).name}: missing required columns: {sorted(missing)}")

    if "notes" not in df.columns:
        df["notes"] = None

    # drop fully empty rows
    df = df.dropna(how="all").copy()

    # CSV line numbers (header is line 1) for error messages
    df["line"] = df.index + 2

    df["date"] = _parse_column(df, "date", parse_date)
    df["amount"] = _parse_column(df, "amount", parse_amount)

    return df.sort_values(["date", "line"])


def import_transactions_csv(db: Session, identity: CurrentUser, path: Path) -> int:
    """
    Import every row of the CSV for the caller's master account.

    Returns the number of transactions created. Rows already imported stay
    committed if a later row fails; the error names the failing CSV line.
    """
    df = load_csv(path)

    categories: Dict[Tuple[str, str], str] = {
        (c.name.strip().lower(), c.kind): c.id
        for c in db.query(Category).filter(Category.master_account_id == identity.master_account_id)
    }
    accounts: Dict[str, str] = {
        a.name.strip().lower(): a.id
        for a in db.query(Account).filter(Account.master_account_id == identity.master_account_id)
    }

    imported = 0
    for row in df.itertuples(index=False):
        if row.amount == 0:
            logger.warning("Line %s: zero amount, skipped", row.line)
            continue

        kind = INCOME if row.amount > 0 else EXPENSE
        category_name = (_none_if_nan(row.category) or "").lower()
        account_name = (_none_if_nan(row.account) or "").lower()

        category_id = categories.get((category_name, kind))
        if category_id is None:
            raise NotFoundError(f"Line {row.line}: unknown {kind} category {row.category!r}")

        account_id = accounts.get(account_name)
        if account_id is None:
            raise NotFoundError(f"Line {row.line}: unknown account {row.account!r}")

        payload = TransactionCreate(
            kind=kind,
            amount=abs(row.amount),
            category_id=category_id,
            account_id=account_id,
            date=row.date,
            notes=_none_if_nan(row.notes),
        )
        try:
            ledger.create_transaction(db, identity, payload)
        except AppError as exc:
            raise AppError(exc.code, f"Line {row.line}: {exc.message}", exc.status_code, exc.context) from exc
        imported += 1

    logger.info("Imported %d transactions from %s", imported, Path(path).name)
    return imported
