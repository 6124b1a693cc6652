"""
services/analytics_service.py
------------------------------
Read-side aggregates over the ledger: totals, category breakdown,
monthly trend and current-vs-previous month comparison.

Grouping and summing happen in the database; this layer zero-fills
missing groups, derives percentages and guards every division so the
results are always finite and ready for JSON.
"""

from datetime import date
from typing import Optional

from repositories.transaction_repo import TransactionRepository
from utils.date_helpers import DateRange, month_bounds, previous_month, today
from utils.logger import get_logger

logger = get_logger(__name__)


class AnalyticsService:
    """Aggregate queries scoped to one user and an optional date window."""

    def __init__(self, repo: Optional[TransactionRepository] = None):
        self.repo = repo or TransactionRepository()

    def summary(self, user_id: int, date_range: Optional[DateRange] = None) -> dict:
        """
        Total income, total expense and savings within the window
        (all time when no window is given).
        """
        income, expense = self._income_expense(user_id, date_range)
        return {
            "totalIncome": income,
            "totalExpense": expense,
            "savings": income - expense,
        }

    def by_category(self, user_id: int, date_range: Optional[DateRange] = None) -> dict:
        """
        Expense totals per category, largest first, with each category's
        share of the overall expense. Shares are 0 when nothing was spent.
        """
        rows = self.repo.expense_by_category(user_id, date_range)
        rows = sorted(rows, key=lambda r: r["total"], reverse=True)
        total_expense = float(sum(r["total"] for r in rows))

        categories = [
            {
                "category": r["category"],
                "total": float(r["total"]),
                "percentage": (r["total"] / total_expense * 100) if total_expense > 0 else 0,
            }
            for r in rows
        ]
        return {"totalExpense": total_expense, "categories": categories}

    def trend(self, user_id: int, date_range: Optional[DateRange] = None) -> list[dict]:
        """Income and expense per calendar month, oldest first."""
        rows = self.repo.monthly_totals(user_id, date_range)
        trend = [
            {
                "year": int(r["year"]),
                "month": int(r["month"]),
                "income": float(r.get("income") or 0),
                "expense": float(r.get("expense") or 0),
            }
            for r in rows
        ]
        trend.sort(key=lambda r: (r["year"], r["month"]))
        return trend

    def month_compare(self, user_id: int, now: Optional[date] = None) -> dict:
        """
        Compare the current month so far with the whole previous month.

        Args:
            user_id: Owning user ID.
            now: Reference day (defaults to today).
        """
        ref = now or today()
        current = DateRange(date(ref.year, ref.month, 1), ref)
        prev_year, prev_month = previous_month(ref.year, ref.month)
        previous = DateRange(*month_bounds(prev_year, prev_month))

        return {
            "currentMonth": self._month_totals(user_id, current),
            "previousMonth": self._month_totals(user_id, previous),
        }

    # ── HELPERS ───────────────────────────────────────────

    def _income_expense(self, user_id: int, date_range: Optional[DateRange]) -> tuple[float, float]:
        totals = self.repo.totals_by_type(user_id, date_range)
        return float(totals.get("income", 0)), float(totals.get("expense", 0))

    def _month_totals(self, user_id: int, date_range: DateRange) -> dict:
        income, expense = self._income_expense(user_id, date_range)
        return {"income": income, "expense": expense, "savings": income - expense}
