"""
models/budget.py
----------------
Domain model for monthly category budgets.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Budget:
    """
    A spending limit for one (user, category, month, year) tuple.

    ``spent`` and the values derived from it are filled in by the
    budget service and never stored.
    """
    user_id: int
    category: str
    limit: float
    month: int  # 1-12
    year: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    spent: float = 0.0

    @property
    def remaining(self) -> float:
        return self.limit - self.spent

    @property
    def percent_used(self) -> float:
        if self.limit <= 0:
            return 0.0
        return round(self.spent / self.limit * 100, 2)

    @property
    def is_exceeded(self) -> bool:
        return self.spent > self.limit

    def to_dict(self, with_usage: bool = False) -> dict:
        data = {
            "_id": self.id,
            "user": self.user_id,
            "category": self.category,
            "limit": self.limit,
            "month": self.month,
            "year": self.year,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if with_usage:
            data.update({
                "spent": self.spent,
                "remaining": self.remaining,
                "percentUsed": self.percent_used,
                "isExceeded": self.is_exceeded,
            })
        return data
