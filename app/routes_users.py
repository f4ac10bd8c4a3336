# routes_users.py
"""
Routes for managing the users of a master account.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.deps import CurrentUser, get_app_settings, get_db, require_read, require_write
from app.errors import ConflictError, ForbiddenError, NotFoundError
from app.responses import serialize_user, success_response
from app.schemas import UserCreate, UserUpdate
from app.security import hash_password
from config import Settings
from models import User

router = APIRouter(prefix="/users", tags=["users"])


def _get_user(db: Session, current: CurrentUser, user_id: str) -> User:
    user = (
        db.query(User)
        .filter(User.id == user_id, User.master_account_id == current.master_account_id)
        .one_or_none()
    )
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("")
def list_users(
    current: CurrentUser = Depends(require_read),
    db: Session = Depends(get_db),
):
    users = (
        db.query(User)
        .filter(User.master_account_id == current.master_account_id)
        .order_by(User.created_at)
        .all()
    )
    return success_response([serialize_user(u) for u in users], "Users retrieved")


@router.post("")
def create_user(
    payload: UserCreate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    existing = (
        db.query(User.id)
        .filter(User.email == payload.email, User.master_account_id == current.master_account_id)
        .first()
    )
    if existing is not None:
        raise ConflictError("A user with this email already exists")

    user = User(
        master_account_id=current.master_account_id,
        email=payload.email,
        password_hash=hash_password(payload.password, settings.bcrypt_rounds),
        full_name=payload.full_name,
        permission=payload.permission,
        photo_url=str(payload.photo_url) if payload.photo_url else None,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return success_response(serialize_user(user), "User created")


@router.patch("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    user = _get_user(db, current, user_id)

    for name, value in payload.changes().items():
        setattr(user, name, value)
    db.commit()
    db.refresh(user)

    return success_response(serialize_user(user), "User updated")


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    current: CurrentUser = Depends(require_write),
    db: Session = Depends(get_db),
):
    if user_id == current.user_id:
        raise ForbiddenError("You cannot delete your own user")

    user = _get_user(db, current, user_id)
    db.delete(user)
    db.commit()

    return success_response(None, "User deleted")
