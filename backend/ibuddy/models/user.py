"""
iBuddy Backend — User & Password Models
=========================================

What:  ORM models for the `users` and `passwords` collections, plus the Role
       enumeration shared by every authorization rule.

Table Design:
    users       PK id = "User#<lowercased email>", one row per account
    passwords   PK user_id (same key as users.id), one bcrypt hash per account

    Passwords live in their own table so that loading a user never loads
    the hash; only the identity store reads `passwords`.
"""

from datetime import date
from enum import Enum

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from ibuddy.database import Base


class Role(str, Enum):
    """
    Closed, totally ordered role enumeration.

    Values are numeric strings for compatibility with stored records;
    comparisons use the numeric rank: BUDDY < HR < PRESIDENT < ADMIN.
    """

    BUDDY = "0"
    HR = "1"
    PRESIDENT = "2"
    ADMIN = "3"

    @property
    def rank(self) -> int:
        return int(self.value)

    @classmethod
    def top(cls) -> "Role":
        return max(cls, key=lambda role: role.rank)

    def __lt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank


class UserRecord(Base):
    """One account. `email` is stored lowercased and is unique by construction of `id`."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(330), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    faculty: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(1), nullable=False, default=Role.BUDDY.value)

    # Contractor window: a buddy is active only until agreement_end_date
    agreement_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    agreement_end_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<UserRecord(id='{self.id}', role='{self.role}')>"


class PasswordRecord(Base):
    __tablename__ = "passwords"

    user_id: Mapped[str] = mapped_column(String(330), primary_key=True)
    password: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:
        # never include the hash
        return f"<PasswordRecord(user_id='{self.user_id}')>"
