"""
services/budget_service.py
---------------------------
Business logic for monthly budget limits and tracking.
"""

from typing import Any, Optional

from models.budget import Budget
from repositories.budget_repo import BudgetRepository
from repositories.transaction_repo import TransactionRepository
from services.validators import CATEGORY_MAX_LENGTH, require_amount, require_month, require_text
from utils.date_helpers import DateRange, today
from utils.errors import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class BudgetService:
    """Manages monthly budget limits and their usage."""

    def __init__(
        self,
        budget_repo: Optional[BudgetRepository] = None,
        tx_repo: Optional[TransactionRepository] = None,
    ):
        self.budget_repo = budget_repo or BudgetRepository()
        self.tx_repo = tx_repo or TransactionRepository()

    def create_budget(self, user_id: int, category: Any, limit: Any, month: Any, year: Any) -> Budget:
        """
        Set a limit for a category in a given month.

        Raises:
            ValidationError: On missing or malformed fields.
            ConflictError: If that (category, month, year) already has a budget.
        """
        month, year = require_month(month, year)
        budget = Budget(
            user_id=user_id,
            category=require_text(category, "category", max_length=CATEGORY_MAX_LENGTH),
            limit=require_amount(limit, "limit"),
            month=month,
            year=year,
        )
        return self.budget_repo.add(budget)

    def get_budgets(self, user_id: int, month: Optional[int] = None, year: Optional[int] = None) -> list[Budget]:
        """
        Budgets for a month joined with what was spent in each category.
        Defaults to the current month.
        """
        ref = today()
        month, year = require_month(
            ref.month if month is None else month,
            ref.year if year is None else year,
        )

        budgets = self.budget_repo.get_for_month(user_id, month, year)
        if not budgets:
            return []

        spending = self.tx_repo.expense_by_category(
            user_id,
            DateRange.for_month(year, month),
            categories=[b.category for b in budgets],
        )
        spent_map = {row["category"]: float(row["total"]) for row in spending}

        for b in budgets:
            b.spent = spent_map.get(b.category, 0.0)
        return budgets

    def update_budget(self, budget_id: int, user_id: int, limit: Any) -> Budget:
        """Change the limit of an existing budget."""
        budget = self.budget_repo.update_limit(budget_id, user_id, require_amount(limit, "limit"))
        if budget is None:
            raise NotFoundError("Budget not found")
        return budget

    def delete_budget(self, budget_id: int, user_id: int) -> None:
        if not self.budget_repo.delete(budget_id, user_id):
            raise NotFoundError("Budget not found")
