"""
services/recurring_service.py
------------------------------
Business logic for managing recurring rules (create, list, edit,
pause/resume, delete). Executing due rules lives in recurring_executor.
"""

from typing import Any, Optional

from models.recurring import RULE_STATUSES, RecurringRule
from models.transaction import PAYMENT_METHODS, TRANSACTION_TYPES
from repositories.recurring_repo import RecurringRepository
from services.validators import (
    CATEGORY_MAX_LENGTH,
    optional_date,
    require_amount,
    require_choice,
    require_date,
    require_positive_int,
    require_text,
)
from utils.date_helpers import FREQUENCIES
from utils.errors import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

# Fields a user may change through `update`; `last_executed_at` is engine-only.
EDITABLE_FIELDS = (
    "title", "amount", "type", "category", "payment_method",
    "frequency", "interval", "start_date", "end_date", "status",
)


class RecurringService:
    """
    Handles all business logic for recurring rules.

    Responsibilities:
        - Validate rule definitions before they reach the store.
        - Owner-scoped CRUD and status changes.
    """

    def __init__(self, repo: Optional[RecurringRepository] = None):
        self.repo = repo or RecurringRepository()

    def create(
        self,
        user_id: int,
        title: Any,
        amount: Any,
        type_: Any,
        category: Any,
        frequency: Any,
        start_date: Any,
        interval: Any = None,
        end_date: Any = None,
        payment_method: Any = None,
    ) -> RecurringRule:
        """
        Validate and persist a new rule.

        Raises:
            ValidationError: On missing or malformed fields.
        """
        rule = RecurringRule(
            user_id=user_id,
            title=require_text(title, "title", max_length=200),
            amount=require_amount(amount),
            type=require_choice(type_, "type", TRANSACTION_TYPES),
            category=require_text(category, "category", max_length=CATEGORY_MAX_LENGTH),
            frequency=require_choice(frequency, "frequency", FREQUENCIES),
            start_date=require_date(start_date, "startDate"),
            interval=1 if interval is None else require_positive_int(interval, "interval"),
            end_date=optional_date(end_date),
            payment_method=require_choice(payment_method or "other", "paymentMethod", PAYMENT_METHODS),
        )
        self._check_window(rule)
        return self.repo.add(rule)

    def list(self, user_id: int) -> list[RecurringRule]:
        """All of a user's rules, newest first."""
        return self.repo.get_all(user_id)

    def get(self, rule_id: int, user_id: int) -> RecurringRule:
        rule = self.repo.get_by_id(rule_id, user_id)
        if rule is None:
            raise NotFoundError("Recurring rule not found")
        return rule

    def update(self, rule_id: int, user_id: int, changes: dict) -> RecurringRule:
        """
        Apply a partial edit. Only keys in EDITABLE_FIELDS are accepted.

        Editing never fires occurrences; the next engine run sees the new
        values. Moving `start_date` earlier does not replay skipped periods
        because `last_executed_at` is kept.

        Raises:
            NotFoundError: If the rule does not belong to the user.
            ValidationError: On unknown or malformed fields.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        rule = self.get(rule_id, user_id)
        if "title" in changes:
            rule.title = require_text(changes["title"], "title", max_length=200)
        if "amount" in changes:
            rule.amount = require_amount(changes["amount"])
        if "type" in changes:
            rule.type = require_choice(changes["type"], "type", TRANSACTION_TYPES)
        if "category" in changes:
            rule.category = require_text(changes["category"], "category", max_length=CATEGORY_MAX_LENGTH)
        if "payment_method" in changes:
            rule.payment_method = require_choice(changes["payment_method"], "paymentMethod", PAYMENT_METHODS)
        if "frequency" in changes:
            rule.frequency = require_choice(changes["frequency"], "frequency", FREQUENCIES)
        if "interval" in changes:
            rule.interval = require_positive_int(changes["interval"], "interval")
        if "start_date" in changes:
            rule.start_date = require_date(changes["start_date"], "startDate")
        if "end_date" in changes:
            rule.end_date = optional_date(changes["end_date"])
        if "status" in changes:
            rule.status = require_choice(changes["status"], "status", RULE_STATUSES)
        self._check_window(rule)

        if not self.repo.update(rule):
            raise NotFoundError("Recurring rule not found")
        logger.info(f"Updated recurring rule #{rule_id} for user {user_id}")
        return rule

    def set_status(self, rule_id: int, user_id: int, status: Any) -> RecurringRule:
        """Pause or resume a rule."""
        status = require_choice(status, "status", RULE_STATUSES)
        rule = self.repo.set_status(rule_id, user_id, status)
        if rule is None:
            raise NotFoundError("Recurring rule not found")
        return rule

    def delete(self, rule_id: int, user_id: int) -> None:
        if not self.repo.delete(rule_id, user_id):
            raise NotFoundError("Recurring rule not found")

    @staticmethod
    def _check_window(rule: RecurringRule) -> None:
        if rule.end_date is not None and rule.end_date < rule.start_date:
            raise ValidationError("endDate cannot be before startDate")
