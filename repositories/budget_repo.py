"""
repositories/budget_repo.py
-----------------------------
Data access layer for monthly budgets.
"""

from typing import Optional

from psycopg2 import errors

from db.connection import get_connection, release_connection
from models.budget import Budget
from utils.errors import ConflictError
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = "id, user_id, category, limit_amount, month, year, created_at"


class BudgetRepository:
    """Repository for CRUD operations on the budgets table."""

    def add(self, budget: Budget) -> Budget:
        """
        Insert a budget for a (category, month, year) tuple.

        Raises:
            ConflictError: If the user already has a budget for that tuple.
        """
        sql = """
            INSERT INTO budgets (user_id, category, limit_amount, month, year)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (budget.user_id, budget.category, budget.limit, budget.month, budget.year))
                row = cur.fetchone()
                budget.id, budget.created_at = row[0], row[1]
            conn.commit()
            logger.info(f"Added budget '{budget.category}' {budget.month}/{budget.year} for user {budget.user_id}")
            return budget
        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError("A budget for this category and month already exists")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add budget: {e}")
            raise
        finally:
            release_connection(conn)

    def get_for_month(self, user_id: int, month: int, year: int) -> list[Budget]:
        """Get all budgets a user set for a given month."""
        sql = f"SELECT {COLUMNS} FROM budgets WHERE user_id = %s AND month = %s AND year = %s ORDER BY category;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, month, year))
                return [self._row_to_budget(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def update_limit(self, budget_id: int, user_id: int, limit: float) -> Optional[Budget]:
        """Change a budget's limit. Returns the updated budget or None."""
        sql = f"UPDATE budgets SET limit_amount = %s WHERE id = %s AND user_id = %s RETURNING {COLUMNS};"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (limit, budget_id, user_id))
                row = cur.fetchone()
            conn.commit()
            return self._row_to_budget(row) if row else None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update budget #{budget_id}: {e}")
            raise
        finally:
            release_connection(conn)

    def delete(self, budget_id: int, user_id: int) -> bool:
        """Delete a budget by ID, scoped to user."""
        sql = "DELETE FROM budgets WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (budget_id, user_id))
                deleted = cur.rowcount > 0
            conn.commit()
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete budget #{budget_id}: {e}")
            raise
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_budget(row: tuple) -> Budget:
        return Budget(
            id=row[0],
            user_id=row[1],
            category=row[2],
            limit=float(row[3]),
            month=row[4],
            year=row[5],
            created_at=row[6],
        )
