"""
repositories/recurring_repo.py
-------------------------------
Data access layer for recurring transaction rules.
All SQL queries related to the `recurring_rules` table live here,
including the atomic "occurrence executed" transition used by the engine.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.recurring import RecurringRule
from models.transaction import Transaction
from repositories.transaction_repo import COLUMNS as TX_COLUMNS, TransactionRepository
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = (
    "id, user_id, title, amount, type, category, payment_method, frequency, "
    "interval_count, start_date, end_date, last_executed_at, status, created_at, updated_at"
)


class RecurringRepository:
    """Repository for CRUD operations on the recurring_rules table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, rule: RecurringRule) -> RecurringRule:
        """
        Insert a new recurring rule.

        Args:
            rule: The RecurringRule to persist.

        Returns:
            The same object with its `id` and timestamps populated.
        """
        sql = """
            INSERT INTO recurring_rules
                (user_id, title, amount, type, category, payment_method,
                 frequency, interval_count, start_date, end_date, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at, updated_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    rule.user_id, rule.title, rule.amount, rule.type,
                    rule.category, rule.payment_method, rule.frequency,
                    rule.interval, rule.start_date, rule.end_date, rule.status,
                ))
                row = cur.fetchone()
                rule.id, rule.created_at, rule.updated_at = row[0], row[1], row[2]
            conn.commit()
            logger.info(f"Added recurring rule '{rule.title}' #{rule.id}")
            return rule
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add recurring rule: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(self, user_id: int, active_only: bool = False) -> list[RecurringRule]:
        """
        Get all recurring rules for a user.

        Args:
            user_id: Owning user ID.
            active_only: If True, only return rules with status 'active'.

        Returns:
            List of RecurringRule objects, newest first.
        """
        sql = f"SELECT {COLUMNS} FROM recurring_rules WHERE user_id = %s"
        params: list = [user_id]
        if active_only:
            sql += " AND status = 'active'"
        sql += " ORDER BY created_at DESC, id DESC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_rule(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_by_id(self, rule_id: int, user_id: int) -> Optional[RecurringRule]:
        """Fetch a single recurring rule by ID, scoped to user."""
        sql = f"SELECT {COLUMNS} FROM recurring_rules WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (rule_id, user_id))
                row = cur.fetchone()
                return self._row_to_rule(row) if row else None
        finally:
            release_connection(conn)

    def get_user_ids_with_active_rules(self) -> list[int]:
        """IDs of every user owning at least one active rule (global sweep)."""
        sql = "SELECT DISTINCT user_id FROM recurring_rules WHERE status = 'active' ORDER BY user_id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [r[0] for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, rule: RecurringRule) -> bool:
        """
        Persist user-editable fields. `last_executed_at` is never written here.

        Returns:
            True if a row was updated, False otherwise.
        """
        sql = """
            UPDATE recurring_rules
            SET title = %s, amount = %s, type = %s, category = %s,
                payment_method = %s, frequency = %s, interval_count = %s,
                start_date = %s, end_date = %s, status = %s, updated_at = NOW()
            WHERE id = %s AND user_id = %s
            RETURNING updated_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    rule.title, rule.amount, rule.type, rule.category,
                    rule.payment_method, rule.frequency, rule.interval,
                    rule.start_date, rule.end_date, rule.status,
                    rule.id, rule.user_id,
                ))
                row = cur.fetchone()
                if row:
                    rule.updated_at = row[0]
            conn.commit()
            return row is not None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update recurring rule #{rule.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def set_status(self, rule_id: int, user_id: int, status: str) -> Optional[RecurringRule]:
        """Pause or resume a rule. Dates are left untouched."""
        sql = f"""
            UPDATE recurring_rules SET status = %s, updated_at = NOW()
            WHERE id = %s AND user_id = %s
            RETURNING {COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (status, rule_id, user_id))
                row = cur.fetchone()
            conn.commit()
            if row:
                logger.info(f"Recurring rule #{rule_id} is now {status}")
            return self._row_to_rule(row) if row else None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to set status of recurring rule #{rule_id}: {e}")
            raise
        finally:
            release_connection(conn)

    def record_execution(self, rule: RecurringRule, entry: Transaction) -> Optional[Transaction]:
        """
        Materialize one occurrence of ``rule`` as ``entry`` and advance the
        rule's `last_executed_at` to the entry date, in a single transaction.

        The marker update is conditional on the value the caller read, and
        the insert is keyed on (recurring_id, occurrence_date), so concurrent
        runs for the same user cannot both materialize the same occurrence.

        Returns:
            The stored Transaction, or None if another run got there first
            or the rule was paused/deleted in the meantime.
        """
        advance_sql = """
            UPDATE recurring_rules
            SET last_executed_at = %s
            WHERE id = %s AND user_id = %s AND status = 'active'
              AND last_executed_at IS NOT DISTINCT FROM %s;
        """
        insert_sql = f"""
            INSERT INTO transactions
                (user_id, type, amount, category, date, description,
                 payment_method, is_recurring, recurring_id, occurrence_date)
            VALUES (%s, %s, %s, %s, %s, %s, %s, TRUE, %s, %s)
            ON CONFLICT (recurring_id, occurrence_date) WHERE recurring_id IS NOT NULL DO NOTHING
            RETURNING {TX_COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(advance_sql, (entry.date, rule.id, rule.user_id, rule.last_executed_at))
                if cur.rowcount == 0:
                    conn.rollback()
                    logger.info(f"Recurring rule #{rule.id} already advanced elsewhere; skipping")
                    return None

                cur.execute(insert_sql, (
                    entry.user_id, entry.type, entry.amount, entry.category,
                    entry.date, entry.description, entry.payment_method, rule.id,
                    entry.occurrence_date,
                ))
                row = cur.fetchone()
                if row is None:
                    conn.rollback()
                    logger.info(f"Occurrence {entry.date} of rule #{rule.id} already exists; skipping")
                    return None
            conn.commit()
            rule.last_executed_at = entry.date
            return TransactionRepository.row_to_transaction(row)
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to record execution of recurring rule #{rule.id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, rule_id: int, user_id: int) -> bool:
        """Delete a recurring rule by ID, scoped to user."""
        sql = "DELETE FROM recurring_rules WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (rule_id, user_id))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted recurring rule #{rule_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete recurring rule #{rule_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_rule(row: tuple) -> RecurringRule:
        """Convert a database row tuple (in COLUMNS order) to a RecurringRule."""
        return RecurringRule(
            id=row[0],
            user_id=row[1],
            title=row[2],
            amount=float(row[3]),
            type=row[4],
            category=row[5],
            payment_method=row[6],
            frequency=row[7],
            interval=row[8],
            start_date=row[9],
            end_date=row[10],
            last_executed_at=row[11],
            status=row[12],
            created_at=row[13],
            updated_at=row[14],
        )
