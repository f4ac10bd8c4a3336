# app/services/reports.py
#
# Report aggregates
# Tenant-scoped SQL aggregates behind the /reports endpoints. Amounts are
# stored positive; the transaction kind decides the sign.

from typing import Any, Dict, List

from sqlalchemy import case, extract, func
from sqlalchemy.orm import Session

from app.responses import money
from app.services.periods import get_period_range, month_name
from models import EXPENSE, INCOME, Account, Category, Transaction


def _percentage(part: float, total: float) -> float:
    return round(part / total * 100, 2) if total > 0 else 0.0


def _period_filter(master_account_id: str, start, end_exclusive):
    return (
        Transaction.master_account_id == master_account_id,
        Transaction.date >= start,
        Transaction.date < end_exclusive,
    )


def financial_summary(db: Session, master_account_id: str, year: int, month: int | None = None) -> Dict[str, Any]:
    """
    Income, expense and net totals for a month or a whole year, plus the
    current balance across active accounts.
    """
    start, end, label, months = get_period_range(year, month)

    total_income, total_expense = (
        db.query(
            func.coalesce(
                func.sum(case((Transaction.kind == INCOME, Transaction.amount), else_=0)),
                0,
            ).label("total_income"),
            func.coalesce(
                func.sum(case((Transaction.kind == EXPENSE, Transaction.amount), else_=0)),
                0,
            ).label("total_expense"),
        )
        .select_from(Transaction)
        .filter(*_period_filter(master_account_id, start, end))
        .one()
    )

    total_income = money(total_income)
    total_expense = money(total_expense)

    total_balance = (
        db.query(func.coalesce(func.sum(Account.balance), 0))
        .filter(
            Account.master_account_id == master_account_id,
            Account.is_active.is_(True),
        )
        .scalar()
    )

    return {
        "period": label,
        "total_income": total_income,
        "total_expense": total_expense,
        "net_balance": round(total_income - total_expense, 2),
        "monthly_average": round(total_income / months, 2),
        "months_analyzed": months,
        "total_account_balance": money(total_balance),
    }


def totals_by_category(
    db: Session,
    master_account_id: str,
    kind: str,
    year: int,
    month: int | None = None,
) -> Dict[str, Any]:
    """Per-category totals for one kind, largest first, with share of the total."""
    start, end, label, _ = get_period_range(year, month)

    total_col = func.sum(Transaction.amount)
    rows = (
        db.query(
            Category.id.label("category_id"),
            Category.name.label("category_name"),
            Category.icon.label("category_icon"),
            Category.color.label("category_color"),
            total_col.label("total"),
            func.count(Transaction.id).label("transaction_count"),
        )
        .select_from(Transaction)
        .join(Category, Transaction.category_id == Category.id)
        .filter(
            *_period_filter(master_account_id, start, end),
            Transaction.kind == kind,
        )
        .group_by(Category.id, Category.name, Category.icon, Category.color)
        .order_by(total_col.desc())
        .all()
    )

    items: List[Dict[str, Any]] = [
        {
            "category_id": r.category_id,
            "category_name": r.category_name,
            "category_icon": r.category_icon,
            "category_color": r.category_color,
            "total": money(r.total),
            "transaction_count": int(r.transaction_count),
        }
        for r in rows
    ]
    grand_total = round(sum(item["total"] for item in items), 2)
    for item in items:
        item["percentage"] = _percentage(item["total"], grand_total)

    return {"period": label, "total": grand_total, "categories": items}


def account_balances(db: Session, master_account_id: str) -> Dict[str, Any]:
    accounts = (
        db.query(Account)
        .filter(
            Account.master_account_id == master_account_id,
            Account.is_active.is_(True),
        )
        .order_by(Account.balance.asc())
        .all()
    )

    total_balance = round(sum(money(a.balance) for a in accounts), 2)
    items = [
        {
            "account_id": a.id,
            "account_name": a.name,
            "account_type": a.type,
            "account_icon": a.icon,
            "account_color": a.color,
            "balance": money(a.balance),
            "percentage": _percentage(money(a.balance), total_balance),
        }
        for a in accounts
    ]
    return {"total_balance": total_balance, "accounts": items}


def monthly_evolution(db: Session, master_account_id: str, year: int) -> Dict[str, Any]:
    """Income/expense/net per month of the year (months without activity omitted)."""
    start, end, _, _ = get_period_range(year)
    month_col = extract("month", Transaction.date)

    rows = (
        db.query(
            month_col.label("month"),
            func.coalesce(
                func.sum(case((Transaction.kind == INCOME, Transaction.amount), else_=0)), 0
            ).label("total_income"),
            func.coalesce(
                func.sum(case((Transaction.kind == EXPENSE, Transaction.amount), else_=0)), 0
            ).label("total_expense"),
        )
        .select_from(Transaction)
        .filter(*_period_filter(master_account_id, start, end))
        .group_by(month_col)
        .order_by(month_col)
        .all()
    )

    months = []
    for r in rows:
        month = int(r.month)
        income = money(r.total_income)
        expense = money(r.total_expense)
        months.append(
            {
                "month": f"{month:02d}",
                "month_name": month_name(month),
                "total_income": income,
                "total_expense": expense,
                "net_balance": round(income - expense, 2),
            }
        )

    return {"year": year, "months": months}
