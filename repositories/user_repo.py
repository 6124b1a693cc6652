"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional

from psycopg2 import errors

from db.connection import get_connection, release_connection
from models.user import User
from utils.errors import ConflictError
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = "id, name, email, password_hash, avatar_color, created_at"


class UserRepository:
    """Repository for CRUD operations on the users table."""

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: If the e-mail is already registered.
        """
        sql = """
            INSERT INTO users (name, email, password_hash, avatar_color)
            VALUES (%s, %s, %s, %s)
            RETURNING id, created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user.name, user.email, user.password_hash, user.avatar_color))
                row = cur.fetchone()
                user.id, user.created_at = row[0], row[1]
            conn.commit()
            logger.info(f"Registered user #{user.id}")
            return user
        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError("User with this email already exists", status_code=400)
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add user: {e}")
            raise
        finally:
            release_connection(conn)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Fetch a user by their (lower-cased) e-mail.

        Returns:
            User or None.
        """
        sql = f"SELECT {COLUMNS} FROM users WHERE email = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (email,))
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        finally:
            release_connection(conn)

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Fetch a user by primary key."""
        sql = f"SELECT {COLUMNS} FROM users WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        finally:
            release_connection(conn)

    def update_profile(self, user: User) -> bool:
        """Persist name and avatar color."""
        sql = "UPDATE users SET name = %s, avatar_color = %s WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user.name, user.avatar_color, user.id))
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update user #{user.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def update_password(self, user_id: int, password_hash: str) -> bool:
        """Replace the stored password hash."""
        sql = "UPDATE users SET password_hash = %s WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (password_hash, user_id))
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Password changed for user #{user_id}")
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to change password for user #{user_id}: {e}")
            raise
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        return User(
            id=row[0],
            name=row[1],
            email=row[2],
            password_hash=row[3],
            avatar_color=row[4],
            created_at=row[5],
        )
