# app/security.py
# Role: Password hashing (bcrypt) and bearer token encode/decode (PyJWT).

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from app.errors import UnauthorizedError
from config import Settings
from models import User


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user: User, settings: Settings) -> str:
    """
    Sign a token carrying the caller's identity.

    Claims: user_id, master_account_id, permission, email, exp.
    """
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expires_hours)
    payload = {
        "user_id": user.id,
        "master_account_id": user.master_account_id,
        "permission": user.permission,
        "email": user.email,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if not payload.get("user_id") or not payload.get("master_account_id"):
        raise UnauthorizedError("Invalid token")
    return payload
