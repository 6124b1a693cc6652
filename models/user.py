"""
models/user.py
--------------
Domain model for user accounts.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """
    Represents a registered account.

    Attributes:
        id: Database primary key (None for new records).
        name: Display name.
        email: Lower-cased, unique login.
        password_hash: bcrypt hash; never serialized.
        avatar_color: UI theme color.
        created_at: Timestamp when the account was created.
    """
    name: str
    email: str
    password_hash: str
    avatar_color: str = "emerald"
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        """Profile fields safe to return to the client."""
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "avatarColor": self.avatar_color,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
