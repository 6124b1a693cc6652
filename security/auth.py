"""
security/auth.py
-----------------
Password hashing, session tokens and the FastAPI dependency that
resolves the authenticated user for protected routes.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Header

from config import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_SECRET
from repositories.user_repo import UserRepository
from utils.errors import AuthenticationError
from utils.logger import get_logger

logger = get_logger(__name__)
user_repo = UserRepository()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_token(user_id: int) -> str:
    """Sign a session token for ``user_id`` valid for JWT_EXPIRES_DAYS."""
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> int:
    """
    Verify a session token and return the user ID it carries.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return int(payload["id"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Rejected session token: {e}")
        raise AuthenticationError("Not authorized, token failed") from e


def current_user_id(authorization: str | None = Header(None)) -> int:
    """
    FastAPI dependency for protected routes.

    Usage:
        @router.get("/")
        def handler(user_id: int = Depends(current_user_id)):
            ...

    Behavior:
        - Requires ``Authorization: Bearer <token>``.
        - The user must still exist; ownership always comes from the token.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Not authorized, no token")

    user_id = decode_token(authorization.split(" ", 1)[1].strip())
    if user_repo.get_by_id(user_id) is None:
        raise AuthenticationError("User not found")
    return user_id
