"""
Shared fixtures: in-memory stand-ins for the repositories.

Each fake exposes the same methods as its psycopg2-backed counterpart and
returns copies on reads, the way rows fetched from a database behave.
"""

from copy import copy
from dataclasses import replace
from datetime import date, datetime

import pytest

from models.recurring import RecurringRule
from models.transaction import Transaction
from utils.errors import ConflictError


class FakeTransactionRepository:
    def __init__(self):
        self.rows: list[Transaction] = []
        self._next_id = 1

    def add(self, tx):
        tx.id = self._next_id
        tx.created_at = tx.updated_at = datetime(2024, 1, 1, 12, 0)
        self._next_id += 1
        self.rows.append(copy(tx))
        return tx

    def get_by_id(self, tx_id, user_id):
        for row in self.rows:
            if row.id == tx_id and row.user_id == user_id:
                return copy(row)
        return None

    def _scoped(self, user_id, date_range=None):
        return [
            r for r in self.rows
            if r.user_id == user_id and (date_range is None or date_range.contains(r.date))
        ]

    def get_all(self, user_id, tx_type=None, category=None, date_range=None):
        rows = [
            copy(r) for r in self._scoped(user_id, date_range)
            if (tx_type is None or r.type == tx_type) and (category is None or r.category == category)
        ]
        return sorted(rows, key=lambda r: (r.date, r.id), reverse=True)

    def totals_by_type(self, user_id, date_range=None):
        totals = {}
        for r in self._scoped(user_id, date_range):
            totals[r.type] = totals.get(r.type, 0.0) + r.amount
        return totals

    def expense_by_category(self, user_id, date_range=None, categories=None):
        totals = {}
        for r in self._scoped(user_id, date_range):
            if r.type != "expense":
                continue
            if categories is not None and r.category not in categories:
                continue
            totals[r.category] = totals.get(r.category, 0.0) + r.amount
        return [
            {"category": c, "total": t}
            for c, t in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    def monthly_totals(self, user_id, date_range=None):
        buckets = {}
        for r in self._scoped(user_id, date_range):
            bucket = buckets.setdefault((r.date.year, r.date.month), {"income": 0.0, "expense": 0.0})
            bucket[r.type] += r.amount
        return [
            {"year": y, "month": m, **vals}
            for (y, m), vals in sorted(buckets.items())
        ]

    def update(self, tx):
        for i, row in enumerate(self.rows):
            if row.id == tx.id and row.user_id == tx.user_id:
                self.rows[i] = copy(tx)
                return True
        return False

    def delete(self, tx_id, user_id):
        before = len(self.rows)
        self.rows = [r for r in self.rows if not (r.id == tx_id and r.user_id == user_id)]
        return len(self.rows) < before


class FakeRecurringRepository:
    def __init__(self, ledger: FakeTransactionRepository):
        self.ledger = ledger
        self.rules: dict[int, RecurringRule] = {}
        self.fail_ids: set[int] = set()
        self.fail_load = False
        self._next_id = 1

    def add(self, rule):
        rule.id = self._next_id
        rule.created_at = rule.updated_at = datetime(2024, 1, 1, 12, 0)
        self._next_id += 1
        self.rules[rule.id] = replace(rule)
        return rule

    def get_all(self, user_id, active_only=False):
        if self.fail_load:
            raise RuntimeError("store unavailable")
        rules = [
            replace(r) for r in self.rules.values()
            if r.user_id == user_id and (not active_only or r.status == "active")
        ]
        return sorted(rules, key=lambda r: r.id, reverse=True)

    def get_by_id(self, rule_id, user_id):
        rule = self.rules.get(rule_id)
        if rule is None or rule.user_id != user_id:
            return None
        return replace(rule)

    def get_user_ids_with_active_rules(self):
        return sorted({r.user_id for r in self.rules.values() if r.status == "active"})

    def update(self, rule):
        stored = self.get_by_id(rule.id, rule.user_id)
        if stored is None:
            return False
        updated = replace(rule, last_executed_at=stored.last_executed_at)
        self.rules[rule.id] = updated
        return True

    def set_status(self, rule_id, user_id, status):
        rule = self.get_by_id(rule_id, user_id)
        if rule is None:
            return None
        rule.status = status
        self.rules[rule_id] = replace(rule)
        return rule

    def delete(self, rule_id, user_id):
        if self.get_by_id(rule_id, user_id) is None:
            return False
        del self.rules[rule_id]
        return True

    def record_execution(self, rule, entry):
        if rule.id in self.fail_ids:
            raise RuntimeError(f"store error on rule {rule.id}")
        stored = self.rules.get(rule.id)
        if (
            stored is None
            or stored.user_id != rule.user_id
            or stored.status != "active"
            or stored.last_executed_at != rule.last_executed_at
        ):
            return None
        if any(t.recurring_id == rule.id and t.occurrence_date == entry.occurrence_date for t in self.ledger.rows):
            return None
        stored.last_executed_at = entry.date
        rule.last_executed_at = entry.date
        return self.ledger.add(entry)


class FakeBudgetRepository:
    def __init__(self):
        self.rows = []
        self._next_id = 1

    def add(self, budget):
        for b in self.rows:
            if (b.user_id, b.category, b.month, b.year) == (budget.user_id, budget.category, budget.month, budget.year):
                raise ConflictError("A budget for this category and month already exists")
        budget.id = self._next_id
        self._next_id += 1
        self.rows.append(copy(budget))
        return budget

    def get_for_month(self, user_id, month, year):
        return sorted(
            (copy(b) for b in self.rows if b.user_id == user_id and b.month == month and b.year == year),
            key=lambda b: b.category,
        )

    def update_limit(self, budget_id, user_id, limit):
        for b in self.rows:
            if b.id == budget_id and b.user_id == user_id:
                b.limit = limit
                return copy(b)
        return None

    def delete(self, budget_id, user_id):
        before = len(self.rows)
        self.rows = [b for b in self.rows if not (b.id == budget_id and b.user_id == user_id)]
        return len(self.rows) < before


class FakeUserRepository:
    def __init__(self):
        self.users = {}
        self._next_id = 1

    def add(self, user):
        if self.get_by_email(user.email):
            raise ConflictError("User with this email already exists", status_code=400)
        user.id = self._next_id
        user.created_at = datetime(2024, 1, 1, 12, 0)
        self._next_id += 1
        self.users[user.id] = copy(user)
        return user

    def get_by_email(self, email):
        for u in self.users.values():
            if u.email == email:
                return copy(u)
        return None

    def get_by_id(self, user_id):
        user = self.users.get(user_id)
        return copy(user) if user else None

    def update_profile(self, user):
        if user.id not in self.users:
            return False
        self.users[user.id] = copy(user)
        return True

    def update_password(self, user_id, password_hash):
        if user_id not in self.users:
            return False
        self.users[user_id].password_hash = password_hash
        return True


@pytest.fixture
def ledger():
    return FakeTransactionRepository()


@pytest.fixture
def rule_repo(ledger):
    return FakeRecurringRepository(ledger)


@pytest.fixture
def budget_repo():
    return FakeBudgetRepository()


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def make_rule(rule_repo):
    """Store a rule with sensible defaults; keyword arguments override them."""
    def _make(**overrides):
        fields = dict(
            user_id=1,
            title="Rent",
            amount=1000.0,
            type="expense",
            category="Rent",
            frequency="monthly",
            start_date=date(2024, 1, 15),
        )
        fields.update(overrides)
        return rule_repo.add(RecurringRule(**fields))
    return _make


@pytest.fixture
def add_entry(ledger):
    """Store a ledger entry directly."""
    def _add(type_, amount, day, category="General", user_id=1):
        return ledger.add(Transaction(user_id=user_id, type=type_, amount=amount, category=category, date=day))
    return _add
