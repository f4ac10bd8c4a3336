# app/deps.py
# Role: Shared request dependencies.
#       Provides the per-request database session (drawn from the Database
#       built in app/main.py:create_app), the settings object, and the auth
#       gate that turns a bearer token into a CurrentUser.

"""
Shared dependencies for the finance API.

Typical usage in routes:
    db: Session = Depends(get_db)
    user: CurrentUser = Depends(require_read)   # any authenticated user
    user: CurrentUser = Depends(require_write)  # write tier only
"""

from dataclasses import dataclass
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.errors import ForbiddenError, UnauthorizedError
from app.security import decode_access_token
from config import Settings
from models import WRITE, User

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity attached to a request by the auth gate."""

    user_id: str
    master_account_id: str
    permission: str
    email: str

    @property
    def can_write(self) -> bool:
        return self.permission == WRITE


# -------------------------------------------------------------------
# Database / settings
# -------------------------------------------------------------------

def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# -------------------------------------------------------------------
# Auth gate
# -------------------------------------------------------------------

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> CurrentUser:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Authorization token required")

    payload = decode_access_token(credentials.credentials, settings)

    user = (
        db.query(User)
        .filter(
            User.id == payload["user_id"],
            User.master_account_id == payload["master_account_id"],
        )
        .one_or_none()
    )
    if user is None or not user.is_active:
        raise UnauthorizedError("User is invalid or inactive")

    # Permission comes from the row, so downgrades apply to live tokens
    return CurrentUser(
        user_id=user.id,
        master_account_id=user.master_account_id,
        permission=user.permission,
        email=user.email,
    )


def require_read(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    return user


def require_write(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.can_write:
        raise ForbiddenError("Write permission required")
    return user
