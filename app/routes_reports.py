# app/routes_reports.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .deps import CurrentUser, get_db, require_read
from .responses import success_response
from .services import reports
from models import EXPENSE, INCOME

router = APIRouter(prefix="/reports", tags=["reports"])


def _year(year: Optional[int]) -> int:
    return year or date.today().year


@router.get("/summary")
def summary(
    year: Optional[int] = Query(None, ge=1900, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    data = reports.financial_summary(db, current.master_account_id, _year(year), month)
    return success_response(data, "Financial summary retrieved")


@router.get("/expenses-by-category")
def expenses_by_category(
    year: Optional[int] = Query(None, ge=1900, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    data = reports.totals_by_category(db, current.master_account_id, EXPENSE, _year(year), month)
    return success_response(data, "Expenses by category retrieved")


@router.get("/income-by-category")
def income_by_category(
    year: Optional[int] = Query(None, ge=1900, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    data = reports.totals_by_category(db, current.master_account_id, INCOME, _year(year), month)
    return success_response(data, "Income by category retrieved")


@router.get("/account-balances")
def account_balances(
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    return success_response(
        reports.account_balances(db, current.master_account_id),
        "Account balances retrieved",
    )


@router.get("/monthly-evolution")
def monthly_evolution(
    year: Optional[int] = Query(None, ge=1900, le=9998),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    return success_response(
        reports.monthly_evolution(db, current.master_account_id, _year(year)),
        "Monthly evolution retrieved",
    )
