"""
services/recurring_executor.py
-------------------------------
The recurring execution engine.

For one user, scans the active rules, decides which are due as of a
reference day, materializes exactly one ledger entry per due rule and
advances the rule's `last_executed_at` marker.

Rules:
    - At most one occurrence per rule per run. A rule that missed several
      periods produces one entry now, dated the run day, and the rest
      drip out on later runs (no backlog burst).
    - Rules past their end date stay active but are skipped.
    - One rule's failure never stops the others, and `run_for` never raises,
      so it is safe to call inline from the login flow.
"""

from datetime import date
from enum import Enum
from typing import Optional

from models.recurring import RecurringRule
from models.transaction import Transaction
from repositories.recurring_repo import RecurringRepository
from utils.date_helpers import DateLike, add_interval, today, truncate_day
from utils.logger import get_logger

logger = get_logger(__name__)


class RuleDecision(Enum):
    """Outcome of checking one rule against a reference day."""
    DUE = "due"
    NOT_STARTED = "not_started"
    WINDOW_CLOSED = "window_closed"
    NOT_DUE = "not_due"
    INVALID = "invalid"


def next_run_date(rule: RecurringRule) -> date:
    """
    Day the rule is next due: one interval after the last run, or after the
    start date when it has never run.

    Raises:
        ValueError: If the rule's frequency is unknown.
    """
    last_run = truncate_day(rule.last_executed_at or rule.start_date)
    return add_interval(last_run, rule.frequency, rule.interval)


def evaluate(rule: RecurringRule, as_of: date) -> tuple[RuleDecision, Optional[date]]:
    """
    Decide whether ``rule`` is due on ``as_of``.

    Returns:
        (decision, next_run). ``next_run`` is None when the window check
        already decided the outcome or the frequency is unknown.
    """
    as_of = truncate_day(as_of)
    if as_of < truncate_day(rule.start_date):
        return RuleDecision.NOT_STARTED, None
    if rule.end_date is not None and as_of > truncate_day(rule.end_date):
        return RuleDecision.WINDOW_CLOSED, None

    try:
        next_run = next_run_date(rule)
    except ValueError:
        return RuleDecision.INVALID, None

    if as_of < next_run:
        return RuleDecision.NOT_DUE, next_run
    return RuleDecision.DUE, next_run


def build_occurrence(rule: RecurringRule, as_of: date) -> Transaction:
    """Ledger entry for one occurrence of ``rule``, dated the run day."""
    return Transaction(
        user_id=rule.user_id,
        type=rule.type,
        amount=rule.amount,
        category=rule.category,
        date=as_of,
        description=rule.title,
        payment_method=rule.payment_method,
        is_recurring=True,
        recurring_id=rule.id,
        occurrence_date=as_of,
    )


class RecurringExecutor:
    """Runs due recurring rules and records their occurrences."""

    def __init__(self, repo: Optional[RecurringRepository] = None):
        self.repo = repo or RecurringRepository()

    def run_for(self, user_id: int, as_of: Optional[DateLike] = None) -> list[Transaction]:
        """
        Execute the user's due rules once.

        Args:
            user_id: Authenticated user ID.
            as_of: Reference day (defaults to today); any time part is dropped.

        Returns:
            The ledger entries created by this run (possibly empty).
        """
        run_day = truncate_day(as_of) if as_of is not None else today()

        try:
            rules = self.repo.get_all(user_id, active_only=True)
        except Exception as e:
            logger.error(f"Recurring executor could not load rules for user {user_id}: {e}")
            return []

        created: list[Transaction] = []
        for rule in rules:
            try:
                entry = self._process_rule(rule, run_day)
            except Exception as e:
                logger.error(f"Recurring rule #{rule.id} failed for user {user_id}: {e}")
                continue
            if entry is not None:
                created.append(entry)

        if created:
            logger.info(f"Recurring executor created {len(created)} entries for user {user_id} on {run_day}")
        return created

    def run_for_all(self, as_of: Optional[DateLike] = None) -> int:
        """
        Sweep every user with active rules. Same one-occurrence-per-rule
        semantics as `run_for`.

        Returns:
            Total number of ledger entries created.
        """
        try:
            user_ids = self.repo.get_user_ids_with_active_rules()
        except Exception as e:
            logger.error(f"Recurring sweep could not list users: {e}")
            return 0
        return sum(len(self.run_for(uid, as_of)) for uid in user_ids)

    def _process_rule(self, rule: RecurringRule, run_day: date) -> Optional[Transaction]:
        if not rule.is_active():
            return None

        decision, _ = evaluate(rule, run_day)
        if decision is RuleDecision.INVALID:
            logger.warning(f"Recurring rule #{rule.id} has unknown frequency {rule.frequency!r}; skipped")
            return None
        if decision is not RuleDecision.DUE:
            return None

        entry = self.repo.record_execution(rule, build_occurrence(rule, run_day))
        if entry is not None:
            logger.info(f"Materialized '{rule.title}' (rule #{rule.id}) on {run_day}")
        return entry
