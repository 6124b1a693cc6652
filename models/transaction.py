"""
models/transaction.py
---------------------
Domain model for ledger entries (income and expense transactions).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

TRANSACTION_TYPES = ("income", "expense")
PAYMENT_METHODS = ("cash", "card", "upi", "bank_transfer", "other")


@dataclass
class Transaction:
    """
    Represents a single ledger entry.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owning user ID.
        type: Either 'expense' or 'income'.
        amount: Non-negative amount.
        category: Free-form category label.
        date: The economic date of the entry (not the creation time).
        description: Optional human-readable note.
        payment_method: One of PAYMENT_METHODS.
        is_recurring: True when generated by the recurring engine.
        recurring_id: ID of the originating rule (engine entries only).
        occurrence_date: Run day the engine generated the entry for. Fixed at
            creation, so editing `date` never collides with other occurrences.
        created_at: Timestamp when the record was created.
        updated_at: Timestamp of the last edit.
    """
    user_id: int
    type: str  # 'expense' | 'income'
    amount: float
    category: str
    date: date = field(default_factory=date.today)
    description: str = ""
    payment_method: str = "other"
    is_recurring: bool = False
    recurring_id: Optional[int] = None
    occurrence_date: Optional[date] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_expense(self) -> bool:
        """Returns True if this is an expense transaction."""
        return self.type == "expense"

    def is_income(self) -> bool:
        """Returns True if this is an income transaction."""
        return self.type == "income"

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "user": self.user_id,
            "type": self.type,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat(),
            "description": self.description,
            "paymentMethod": self.payment_method,
            "isRecurring": self.is_recurring,
            "recurringId": self.recurring_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __str__(self) -> str:
        sign = "-" if self.is_expense() else "+"
        return f"{sign}{self.amount:.2f} | {self.category} | {self.date}"
