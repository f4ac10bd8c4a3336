# routes_categories.py
"""
Routes for income / expense categories.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.deps import CurrentUser, get_db, require_read, require_write
from app.errors import ConflictError, NotFoundError
from app.responses import serialize_category, success_response
from app.schemas import CategoryCreate, CategoryUpdate
from models import Category, Transaction

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_category(db: Session, current: CurrentUser, category_id: str) -> Category:
    category = (
        db.query(Category)
        .filter(Category.id == category_id, Category.master_account_id == current.master_account_id)
        .one_or_none()
    )
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique(
    db: Session,
    current: CurrentUser,
    name: str,
    kind: str,
    exclude_id: str | None = None,
) -> None:
    query = db.query(Category.id).filter(
        Category.name == name,
        Category.kind == kind,
        Category.master_account_id == current.master_account_id,
    )
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("A category with this name and kind already exists")


@router.get("")
def list_categories(
    kind: Optional[Literal["income", "expense"]] = Query(None),
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    query = db.query(Category).filter(Category.master_account_id == current.master_account_id)
    if kind:
        query = query.filter(Category.kind == kind)

    categories = query.order_by(Category.kind, Category.name).all()
    return success_response([serialize_category(c) for c in categories], "Categories retrieved")


@router.get("/{category_id}")
def get_category(
    category_id: str,
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    return success_response(serialize_category(_get_category(db, current, category_id)), "Category retrieved")


@router.post("")
def create_category(
    payload: CategoryCreate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    _ensure_unique(db, current, payload.name, payload.kind)

    category = Category(
        master_account_id=current.master_account_id,
        name=payload.name,
        kind=payload.kind,
        icon=payload.icon,
        color=payload.color,
        is_active=True,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    return success_response(serialize_category(category), "Category created")


@router.patch("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    category = _get_category(db, current, category_id)
    changes = payload.changes()

    if "name" in changes or "kind" in changes:
        _ensure_unique(
            db,
            current,
            changes.get("name", category.name),
            changes.get("kind", category.kind),
            exclude_id=category.id,
        )

    # Existing transactions must keep matching their category's kind
    if changes.get("kind", category.kind) != category.kind:
        in_use = db.query(Transaction.id).filter(Transaction.category_id == category.id).first()
        if in_use is not None:
            raise ConflictError("Cannot change the kind of a category that has transactions")

    for name, value in changes.items():
        setattr(category, name, value)
    db.commit()
    db.refresh(category)

    return success_response(serialize_category(category), "Category updated")


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    category = _get_category(db, current, category_id)

    try:
        db.delete(category)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("The category has transactions; deactivate it instead")

    return success_response(None, "Category deleted")
