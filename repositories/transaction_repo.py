"""
repositories/transaction_repo.py
--------------------------------
Data access layer for ledger entries.
All SQL queries related to the `transactions` table live here,
including the grouped aggregates used by analytics and budgets.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.transaction import Transaction
from utils.date_helpers import DateRange
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = (
    "id, user_id, type, amount, category, date, description, payment_method, "
    "is_recurring, recurring_id, occurrence_date, created_at, updated_at"
)


def range_clause(date_range: Optional[DateRange], params: list, column: str = "date") -> str:
    """
    Build the SQL fragment for an inclusive date window and append its params.
    The end bound covers the whole end day.
    """
    if date_range is None:
        return ""
    sql = ""
    if date_range.start is not None:
        sql += f" AND {column} >= %s"
        params.append(date_range.start_at())
    if date_range.end is not None:
        sql += f" AND {column} <= %s"
        params.append(date_range.end_at())
    return sql


class TransactionRepository:
    """Repository for CRUD and aggregate queries on the transactions table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, tx: Transaction) -> Transaction:
        """
        Insert a new ledger entry.

        Args:
            tx: The Transaction domain object to persist.

        Returns:
            The same Transaction with `id`, `created_at` and `updated_at` populated.
        """
        sql = """
            INSERT INTO transactions
                (user_id, type, amount, category, date, description,
                 payment_method, is_recurring, recurring_id, occurrence_date)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at, updated_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    tx.user_id, tx.type, tx.amount, tx.category, tx.date,
                    tx.description, tx.payment_method, tx.is_recurring,
                    tx.recurring_id, tx.occurrence_date,
                ))
                row = cur.fetchone()
                tx.id, tx.created_at, tx.updated_at = row[0], row[1], row[2]
            conn.commit()
            logger.info(f"Added {tx.type} #{tx.id} for user {tx.user_id}")
            return tx
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add transaction: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, tx_id: int, user_id: int) -> Optional[Transaction]:
        """Fetch a single transaction by ID, scoped to a user."""
        sql = f"SELECT {COLUMNS} FROM transactions WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (tx_id, user_id))
                row = cur.fetchone()
                return self.row_to_transaction(row) if row else None
        finally:
            release_connection(conn)

    def get_all(
        self,
        user_id: int,
        tx_type: Optional[str] = None,
        category: Optional[str] = None,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        """
        Fetch a user's transactions with optional filters.

        Args:
            user_id: Owning user ID.
            tx_type: Optional filter ('expense' or 'income').
            category: Optional exact category match.
            date_range: Optional inclusive date window.

        Returns:
            List of Transaction objects, latest first.
        """
        sql = f"SELECT {COLUMNS} FROM transactions WHERE user_id = %s"
        params: list = [user_id]
        if tx_type:
            sql += " AND type = %s"
            params.append(tx_type)
        if category:
            sql += " AND category = %s"
            params.append(category)
        sql += range_clause(date_range, params)
        sql += " ORDER BY date DESC, id DESC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self.row_to_transaction(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── AGGREGATES ────────────────────────────────────────

    def totals_by_type(self, user_id: int, date_range: Optional[DateRange] = None) -> dict[str, float]:
        """
        Sum amounts grouped by type.

        Returns:
            Dict keyed by type; types without entries are absent.
        """
        params: list = [user_id]
        sql = "SELECT type, SUM(amount) FROM transactions WHERE user_id = %s"
        sql += range_clause(date_range, params)
        sql += " GROUP BY type;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return {r[0]: float(r[1]) for r in cur.fetchall()}
        finally:
            release_connection(conn)

    def expense_by_category(
        self,
        user_id: int,
        date_range: Optional[DateRange] = None,
        categories: Optional[list[str]] = None,
    ) -> list[dict]:
        """
        Total expense amount grouped by category.

        Args:
            user_id: Owning user ID.
            date_range: Optional inclusive date window.
            categories: Restrict to these categories when given.

        Returns:
            List of dicts: [{'category': str, 'total': float}, ...], largest first.
        """
        params: list = [user_id]
        sql = "SELECT category, SUM(amount) AS total FROM transactions WHERE user_id = %s AND type = 'expense'"
        if categories is not None:
            sql += " AND category = ANY(%s)"
            params.append(list(categories))
        sql += range_clause(date_range, params)
        sql += " GROUP BY category ORDER BY total DESC, category ASC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [{"category": r[0], "total": float(r[1])} for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def monthly_totals(self, user_id: int, date_range: Optional[DateRange] = None) -> list[dict]:
        """
        Income and expense sums per calendar month of the entry date.

        Returns:
            List of dicts [{'year', 'month', 'income', 'expense'}], oldest first.
        """
        params: list = [user_id]
        sql = """
            SELECT EXTRACT(YEAR FROM date)::int AS year,
                   EXTRACT(MONTH FROM date)::int AS month,
                   COALESCE(SUM(CASE WHEN type = 'income' THEN amount END), 0) AS income,
                   COALESCE(SUM(CASE WHEN type = 'expense' THEN amount END), 0) AS expense
            FROM transactions
            WHERE user_id = %s
        """
        sql += range_clause(date_range, params)
        sql += " GROUP BY year, month ORDER BY year ASC, month ASC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    {"year": int(r[0]), "month": int(r[1]), "income": float(r[2]), "expense": float(r[3])}
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, tx: Transaction) -> bool:
        """
        Update an existing transaction's user-editable fields.

        Returns:
            True if a row was updated, False otherwise.
        """
        sql = """
            UPDATE transactions
            SET amount = %s, type = %s, category = %s, date = %s,
                description = %s, payment_method = %s, updated_at = NOW()
            WHERE id = %s AND user_id = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    tx.amount, tx.type, tx.category, tx.date,
                    tx.description, tx.payment_method, tx.id, tx.user_id,
                ))
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update transaction #{tx.id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, tx_id: int, user_id: int) -> bool:
        """
        Delete a transaction by ID, scoped to a user.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM transactions WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (tx_id, user_id))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted transaction #{tx_id} for user {user_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete transaction #{tx_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def row_to_transaction(row: tuple) -> Transaction:
        """Convert a database row tuple (in COLUMNS order) to a Transaction."""
        return Transaction(
            id=row[0],
            user_id=row[1],
            type=row[2],
            amount=float(row[3]),
            category=row[4],
            date=row[5],
            description=row[6] or "",
            payment_method=row[7],
            is_recurring=row[8],
            recurring_id=row[9],
            occurrence_date=row[10],
            created_at=row[11],
            updated_at=row[12],
        )
