"""
iBuddy Backend — Mentee Collection Model
==========================================

What:  ORM model for the `mentees` collection, which stores BOTH mentees and
       their notes (single-table design).

Key Layout:
    pk                  sk                  row
    ────────────────    ────────────────    ─────────────
    Mentee#<id>         Mentee#<id>         the mentee itself (pk == sk)
    Mentee#<id>         Note#<note id>      one note of that mentee

    A mentee and all of its notes share one partition, so
    `pk = :pk AND sk LIKE 'Note#%'` fetches every note in one range query.

Columns are the union of mentee and note attributes; a mentee row leaves
the note columns NULL and vice versa. Note rows have NULL buddy_id and
email, so the two secondary indexes only ever match mentee rows.

Secondary Indexes:
    menteesByBuddyId  (buddy_id)  → a buddy's assigned mentees / their count
    menteeByEmail     (email)     → mentee email uniqueness check
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Date, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ibuddy.database import Base


class MenteeStatus(str, Enum):
    """
    Onboarding status. Any value may follow any other: transition rules, if
    any, belong to the UI, not to the store.
    """

    ASSIGNED = "assigned"          # initial, set when the mentee is created
    CONTACTED = "contacted"        # the buddy reached out
    IN_TOUCH = "in_touch"          # the mentee answered and agreed to be mentored
    ARRIVED = "arrived"            # the mentee arrived in the country
    MET = "met"                    # buddy and mentee met in person
    REJECTED = "rejected"          # the mentee answered but declined
    UNRESPONSIVE = "unresponsive"  # the mentee never answered
    SERVED = "served"              # the mentorship agreement finished


class MenteeItem(Base):
    __tablename__ = "mentees"

    pk: Mapped[str] = mapped_column(String(80), primary_key=True)
    sk: Mapped[str] = mapped_column(String(80), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), nullable=False)

    # ── Mentee attributes (NULL on note rows) ─────────────────────────────
    buddy_id: Mapped[Optional[str]] = mapped_column(String(330), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    country_code: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    home_university: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    host_faculty: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    degree: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    agreement_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    agreement_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # ── Note attributes (NULL on mentee rows) ─────────────────────────────
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author_id: Mapped[Optional[str]] = mapped_column(String(330), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("menteesByBuddyId", "buddy_id"),
        Index("menteeByEmail", "email"),
    )

    def __repr__(self) -> str:
        return f"<MenteeItem(pk='{self.pk}', sk='{self.sk}')>"
