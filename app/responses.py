# app/responses.py
# Role: Response envelope helpers shared by every route module,
#       plus the serializers that turn ORM rows into plain JSON dicts.

from decimal import Decimal
from typing import Any, Dict

from models import Account, Category, Transaction, User


def success_response(data: Any, message: str = "Operation successful") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def make_error(code: str, message: str, context: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if context is not None:
        error["context"] = context
    return {"success": False, "error": error}


def money(value: Decimal | float | None) -> float:
    """Decimal column value -> JSON number, rounded to cents."""
    if value is None:
        return 0.0
    return round(float(value), 2)


# -------------------------------------------------------------------
# Row serializers
# -------------------------------------------------------------------

def serialize_account(account: Account) -> Dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "balance": money(account.balance),
        "type": account.type,
        "color": account.color,
        "icon": account.icon,
        "is_active": account.is_active,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
    }


def serialize_category(category: Category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "kind": category.kind,
        "icon": category.icon,
        "color": category.color,
        "is_active": category.is_active,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


def serialize_user(user: User) -> Dict[str, Any]:
    # password_hash never leaves the server
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "photo_url": user.photo_url,
        "permission": user.permission,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def serialize_transaction(tx: Transaction) -> Dict[str, Any]:
    return {
        "id": tx.id,
        "kind": tx.kind,
        "amount": money(tx.amount),
        "date": tx.date,
        "notes": tx.notes,
        "receipt_url": tx.receipt_url,
        "created_at": tx.created_at,
        "updated_at": tx.updated_at,
        "category": {
            "id": tx.category.id,
            "name": tx.category.name,
            "kind": tx.category.kind,
            "icon": tx.category.icon,
            "color": tx.category.color,
        },
        "account": {
            "id": tx.account.id,
            "name": tx.account.name,
            "type": tx.account.type,
            "color": tx.account.color,
            "icon": tx.account.icon,
        },
    }
