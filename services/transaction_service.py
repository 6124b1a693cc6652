"""
services/transaction_service.py
--------------------------------
Business logic for user-managed ledger entries.
Entries created here never carry a recurring back-reference.
"""

from typing import Any, Optional

from models.transaction import PAYMENT_METHODS, TRANSACTION_TYPES, Transaction
from repositories.transaction_repo import TransactionRepository
from services.validators import CATEGORY_MAX_LENGTH, require_amount, require_choice, require_date, require_text
from utils.date_helpers import DateRange
from utils.errors import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

DESCRIPTION_MAX_LENGTH = 200


class TransactionService:
    """Handles all business logic related to ledger entries."""

    def __init__(self, repo: Optional[TransactionRepository] = None):
        self.repo = repo or TransactionRepository()

    def create(
        self,
        user_id: int,
        amount: Any,
        type_: Any,
        category: Any,
        date: Any,
        description: Any = None,
        payment_method: Any = None,
    ) -> Transaction:
        """
        Validate and persist a new entry.

        Raises:
            ValidationError: On missing or malformed fields.
        """
        tx = Transaction(
            user_id=user_id,
            amount=require_amount(amount),
            type=require_choice(type_, "type", TRANSACTION_TYPES),
            category=require_text(category, "category", max_length=CATEGORY_MAX_LENGTH),
            date=require_date(date, "date"),
            description=self._clean_description(description),
            payment_method=require_choice(payment_method or "other", "paymentMethod", PAYMENT_METHODS),
        )
        return self.repo.add(tx)

    def list(
        self,
        user_id: int,
        type_: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[Transaction]:
        """Filtered entries, latest first. The end date includes the whole day."""
        if type_:
            require_choice(type_, "type", TRANSACTION_TYPES)
        date_range = DateRange.from_strings(start_date, end_date)
        return self.repo.get_all(user_id, tx_type=type_ or None, category=category or None, date_range=date_range)

    def update(self, tx_id: int, user_id: int, changes: dict) -> Transaction:
        """
        Apply a partial edit to an entry owned by the user.

        Raises:
            NotFoundError: If the entry does not exist for this user.
        """
        tx = self.repo.get_by_id(tx_id, user_id)
        if tx is None:
            raise NotFoundError("Transaction not found")

        if "amount" in changes:
            tx.amount = require_amount(changes["amount"])
        if "type" in changes:
            tx.type = require_choice(changes["type"], "type", TRANSACTION_TYPES)
        if "category" in changes:
            tx.category = require_text(changes["category"], "category", max_length=CATEGORY_MAX_LENGTH)
        if "date" in changes:
            tx.date = require_date(changes["date"], "date")
        if "description" in changes:
            tx.description = self._clean_description(changes["description"])
        if "payment_method" in changes:
            tx.payment_method = require_choice(changes["payment_method"], "paymentMethod", PAYMENT_METHODS)

        if not self.repo.update(tx):
            raise NotFoundError("Transaction not found")
        return tx

    def delete(self, tx_id: int, user_id: int) -> None:
        if not self.repo.delete(tx_id, user_id):
            raise NotFoundError("Transaction not found")

    @staticmethod
    def _clean_description(value: Any) -> str:
        if value is None:
            return ""
        text = str(value).strip()
        if len(text) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
        return text
