# routes_auth.py
"""
Routes for login / logout.

Tokens are stateless JWTs: logout only tells the client to drop its token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.deps import get_app_settings, get_db
from app.errors import UnauthorizedError
from app.logging_utils import get_logger
from app.responses import success_response
from app.schemas import LoginRequest
from app.security import create_access_token, verify_password
from config import Settings
from models import MasterAccount, User

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger(__name__)


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    query = (
        db.query(User, MasterAccount)
        .join(MasterAccount, User.master_account_id == MasterAccount.id)
        .filter(
            User.email == payload.email,
            User.is_active.is_(True),
            MasterAccount.is_active.is_(True),
        )
    )
    # The same e-mail may exist under several master accounts
    if payload.master_account_id:
        query = query.filter(User.master_account_id == payload.master_account_id)

    row = query.order_by(User.created_at).first()

    if row is None or not verify_password(payload.password, row.User.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise UnauthorizedError("Invalid credentials")

    user, master = row.User, row.MasterAccount
    token = create_access_token(user, settings)

    return success_response(
        {
            "token": token,
            "user": {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "permission": user.permission,
                "master_account": {"id": master.id, "name": master.name},
            },
        },
        "Login successful",
    )


@router.post("/logout")
def logout():
    return success_response(None, "Session closed")
