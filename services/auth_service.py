"""
services/auth_service.py
-------------------------
Account registration, login and profile management.

Login runs the recurring execution engine for the user before the
session token is issued, so the first reads after login already see
any newly due occurrences.
"""

from typing import Any, Optional

from models.user import User
from repositories.user_repo import UserRepository
from security.auth import create_token, hash_password, verify_password
from services.recurring_executor import RecurringExecutor
from services.validators import require_text
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """
    Handles account flows.

    Workflow (login):
        1. Look the user up by e-mail and check the password.
        2. Run due recurring rules for that user (never fails the login).
        3. Issue a session token.
    """

    def __init__(
        self,
        repo: Optional[UserRepository] = None,
        executor: Optional[RecurringExecutor] = None,
    ):
        self.repo = repo or UserRepository()
        self.executor = executor or RecurringExecutor()

    def register(self, name: Any, email: Any, password: Any) -> dict:
        """
        Create an account and sign the user in.

        Returns:
            Dict with 'user' (public fields) and 'token'.
        """
        if not name or not email or not password:
            raise ValidationError("Please provide name, email and password")
        email = require_text(self._normalize_email(email), "email", max_length=255)
        self._check_password(password)

        if self.repo.get_by_email(email) is not None:
            raise ConflictError("User with this email already exists", status_code=400)

        user = self.repo.add(User(
            name=require_text(name, "name", max_length=100),
            email=email,
            password_hash=hash_password(password),
        ))
        return {"user": user.to_public(), "token": create_token(user.id)}

    def login(self, email: Any, password: Any) -> dict:
        """
        Check credentials, execute due recurring rules, issue a token.

        Raises:
            AuthenticationError: On unknown e-mail or wrong password.
        """
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = self.repo.get_by_email(self._normalize_email(email))
        if user is None or not verify_password(str(password), user.password_hash):
            raise AuthenticationError("Invalid email or password")

        self._run_recurring(user.id)

        logger.info(f"User #{user.id} logged in")
        return {"user": user.to_public(), "token": create_token(user.id)}

    def get_profile(self, user_id: int) -> User:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: int, name: Any = None, avatar_color: Any = None) -> User:
        user = self.get_profile(user_id)
        if name is not None:
            user.name = require_text(name, "name", max_length=100)
        if avatar_color is not None:
            user.avatar_color = require_text(avatar_color, "avatarColor", max_length=30)
        self.repo.update_profile(user)
        return user

    def change_password(self, user_id: int, current_password: Any, new_password: Any) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            ValidationError: If either value is missing or the new one is too short.
            AuthenticationError: If the current password is wrong.
        """
        if not current_password or not new_password:
            raise ValidationError("Both current and new password are required")
        self._check_password(new_password, label="New password")

        user = self.get_profile(user_id)
        if not verify_password(str(current_password), user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        self.repo.update_password(user_id, hash_password(new_password))

    # ── HELPERS ───────────────────────────────────────────

    def _run_recurring(self, user_id: int) -> None:
        try:
            self.executor.run_for(user_id)
        except Exception as e:
            logger.error(f"Recurring execution failed during login of user #{user_id}: {e}")

    @staticmethod
    def _normalize_email(email: Any) -> str:
        return str(email).strip().lower()

    @staticmethod
    def _check_password(password: Any, label: str = "Password") -> None:
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"{label} must be at least {MIN_PASSWORD_LENGTH} characters")
