"""
handlers/schemas.py
-------------------
Request bodies. Field names follow the JSON API (camelCase) through
aliases; services receive the snake_case names.

Types are only as strict as the boundary needs: amounts must be real
numbers (numeric strings are refused), dates stay strings and are
parsed by the services.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

Number = Union[StrictInt, StrictFloat]


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def changes(self) -> dict:
        """Only the fields the client actually sent, snake_case keys."""
        return self.model_dump(exclude_unset=True)


# ── Auth ──────────────────────────────────────────────────

class RegisterIn(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(_Body):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileIn(_Body):
    name: Optional[str] = None
    avatar_color: Optional[str] = Field(None, alias="avatarColor")


class ChangePasswordIn(_Body):
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


# ── Transactions ──────────────────────────────────────────

class TransactionIn(_Body):
    amount: Optional[Number] = None
    type: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")


# ── Recurring rules ───────────────────────────────────────

class RecurringIn(_Body):
    title: Optional[str] = None
    amount: Optional[Number] = None
    type: Optional[str] = None
    category: Optional[str] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    frequency: Optional[str] = None
    interval: Optional[StrictInt] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    status: Optional[str] = None


class StatusIn(_Body):
    status: Optional[str] = None


# ── Budgets ───────────────────────────────────────────────

class BudgetIn(_Body):
    category: Optional[str] = None
    limit: Optional[Number] = None
    month: Optional[StrictInt] = None
    year: Optional[StrictInt] = None


class BudgetLimitIn(_Body):
    limit: Optional[Number] = None
