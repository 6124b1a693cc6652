"""
models/recurring.py
-------------------
Domain model for recurring transaction rules.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

RULE_STATUSES = ("active", "paused")


@dataclass
class RecurringRule:
    """
    A template the recurring engine turns into ledger entries.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owning user ID.
        title: Display label, copied into generated entries' description.
        amount: Non-negative amount of each occurrence.
        type: 'income' or 'expense'.
        category: Free-form category label.
        frequency: 'daily' | 'weekly' | 'monthly' | 'yearly'.
        start_date: First day of the active window.
        interval: Every N units of ``frequency`` (>= 1).
        end_date: Last day of the active window (inclusive), or None.
        last_executed_at: Day of the most recently materialized occurrence.
            Only the engine sets this.
        payment_method: Copied into generated entries.
        status: 'active' or 'paused'.
        created_at: Timestamp when the record was created.
        updated_at: Timestamp of the last edit.
    """
    user_id: int
    title: str
    amount: float
    type: str  # 'expense' | 'income'
    category: str
    frequency: str  # 'daily' | 'weekly' | 'monthly' | 'yearly'
    start_date: date
    interval: int = 1
    end_date: Optional[date] = None
    last_executed_at: Optional[date] = None
    payment_method: str = "other"
    status: str = "active"
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "user": self.user_id,
            "title": self.title,
            "amount": self.amount,
            "type": self.type,
            "category": self.category,
            "paymentMethod": self.payment_method,
            "frequency": self.frequency,
            "interval": self.interval,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "lastExecutedAt": self.last_executed_at.isoformat() if self.last_executed_at else None,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __str__(self) -> str:
        status = "active" if self.is_active() else "paused"
        return (
            f"[{status}] {self.title}: {self.amount:.2f} "
            f"every {self.interval} {self.frequency} from {self.start_date}"
        )
