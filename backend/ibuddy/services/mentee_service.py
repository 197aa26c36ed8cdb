"""
iBuddy Backend — Mentee & Note Store
======================================

What:  Data access for the `mentees` collection: mentees, their notes, and
       the buddy/email secondary-index queries.
How:   Every method takes the AsyncSession to use as its first argument.
       Methods flush but never commit; the request's session dependency
       owns the transaction.
Who:   Called by the mentee route handlers and by UserService (mentee count
       of a user about to be deleted).

Absence is not an error here: lookups return None (or an empty list) and
the caller decides whether that is fatal.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.exceptions import InvariantViolationError
from ibuddy.keys import KeyKind, mentee_key, note_key
from ibuddy.models.mentee import MenteeItem, MenteeStatus
from ibuddy.schemas.mentee import Mentee, MenteeCreate, Note

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _mentee_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    columns = dict(fields)
    if isinstance(columns.get("status"), MenteeStatus):
        columns["status"] = columns["status"].value
    return columns


class MenteeService:
    """
    Mentee and note CRUD over the single-table `mentees` collection.

    Responsibilities:
        - mentee rows:  pk == sk == Mentee#<id>
        - note rows:    pk == Mentee#<mentee id>, sk == Note#<note id>
        - cascading delete of a mentee and its notes
    """

    # ── Mentees ───────────────────────────────────────────────────────────

    async def get_mentee_by_id(self, db: AsyncSession, mentee_id: str) -> Optional[Mentee]:
        key = mentee_key(mentee_id).serialize()
        item = await db.get(MenteeItem, (key, key))
        return Mentee.model_validate(item) if item else None

    async def get_all_mentees(self, db: AsyncSession) -> List[Mentee]:
        result = await db.execute(
            select(MenteeItem)
            .where(MenteeItem.sk.startswith(KeyKind.MENTEE.prefix))
            .order_by(MenteeItem.last_name, MenteeItem.first_name)
        )
        return [Mentee.model_validate(item) for item in result.scalars().all()]

    async def get_mentee_list_items(self, db: AsyncSession, buddy_id: str) -> List[Mentee]:
        """Mentees assigned to one buddy (menteesByBuddyId index)."""
        result = await db.execute(
            select(MenteeItem)
            .where(MenteeItem.buddy_id == buddy_id)
            .order_by(MenteeItem.last_name, MenteeItem.first_name)
        )
        return [Mentee.model_validate(item) for item in result.scalars().all()]

    async def get_mentee_count(self, db: AsyncSession, buddy_id: str) -> int:
        result = await db.execute(
            select(func.count()).select_from(MenteeItem).where(MenteeItem.buddy_id == buddy_id)
        )
        return result.scalar() or 0

    async def create_mentee(self, db: AsyncSession, new_mentee: MenteeCreate) -> Mentee:
        """
        Persist a new mentee under a fresh opaque id.

        The status always starts as ASSIGNED and the email is stored
        lowercased. Raises InvariantViolationError if the mentee cannot be
        read back right after the write.
        """
        mentee_id = _new_id()
        key = mentee_key(mentee_id).serialize()
        fields = new_mentee.model_dump()
        fields["email"] = fields["email"].lower()
        fields["status"] = MenteeStatus.ASSIGNED
        await db.merge(MenteeItem(pk=key, sk=key, id=mentee_id, **_mentee_columns(fields)))
        await db.flush()

        mentee = await self.get_mentee_by_id(db, mentee_id)
        if mentee is None:
            raise InvariantViolationError(
                message="Mentee not found after being created",
                context={"mentee_id": mentee_id},
            )
        logger.info("Mentee %s created and assigned to %s", mentee_id, mentee.buddy_id)
        return mentee

    async def update_mentee(self, db: AsyncSession, mentee: Mentee) -> Mentee:
        """Replace the whole mentee record; id and keys stay as they were."""
        key = mentee_key(mentee.id).serialize()
        fields = mentee.model_dump(exclude={"id"})
        await db.merge(MenteeItem(pk=key, sk=key, id=mentee.id, **_mentee_columns(fields)))
        await db.flush()
        return mentee

    async def update_mentee_status(
        self,
        db: AsyncSession,
        mentee_id: str,
        new_status: MenteeStatus,
    ) -> Optional[Mentee]:
        """
        Set only the status field. Any status may follow any other.

        Returns the updated mentee, or None when no such mentee exists.
        """
        key = mentee_key(mentee_id).serialize()
        item = await db.get(MenteeItem, (key, key))
        if item is None:
            return None
        previous = item.status
        item.status = MenteeStatus(new_status).value
        await db.flush()
        logger.info("Mentee %s status %s -> %s", mentee_id, previous, item.status)
        return Mentee.model_validate(item)

    async def delete_mentee(self, db: AsyncSession, mentee_id: str) -> None:
        """
        Delete a mentee together with all of its notes.

        Each row is removed by its own delete; nothing here retries or
        compensates if one of them fails.
        """
        key = mentee_key(mentee_id).serialize()
        notes = await self.get_notes_of_mentee(db, mentee_id)
        keys = [(key, key)] + [(key, note_key(note.id).serialize()) for note in notes]
        for pk, sk in keys:
            item = await db.get(MenteeItem, (pk, sk))
            if item is not None:
                await db.delete(item)
        await db.flush()
        logger.info("Mentee %s deleted with %d notes", mentee_id, len(notes))

    async def is_email_unique(self, db: AsyncSession, email: str) -> bool:
        """True iff no mentee uses this email (menteeByEmail index)."""
        result = await db.execute(
            select(func.count()).select_from(MenteeItem).where(MenteeItem.email == email.lower())
        )
        return (result.scalar() or 0) == 0

    # ── Notes ─────────────────────────────────────────────────────────────

    async def get_notes_of_mentee(self, db: AsyncSession, mentee_id: str) -> List[Note]:
        result = await db.execute(
            select(MenteeItem)
            .where(
                MenteeItem.pk == mentee_key(mentee_id).serialize(),
                MenteeItem.sk.startswith(KeyKind.NOTE.prefix),
            )
            .order_by(MenteeItem.created_at, MenteeItem.sk)
        )
        return [Note.model_validate(item) for item in result.scalars().all()]

    async def create_note(
        self,
        db: AsyncSession,
        mentee_id: str,
        content: str,
        author_id: str,
    ) -> Note:
        note_id = _new_id()
        item = MenteeItem(
            pk=mentee_key(mentee_id).serialize(),
            sk=note_key(note_id).serialize(),
            id=note_id,
            content=content,
            author_id=author_id,
            created_at=datetime.now(timezone.utc),
        )
        db.add(item)
        await db.flush()
        logger.info("Note %s added to mentee %s by %s", note_id, mentee_id, author_id)
        return Note.model_validate(item)

    async def get_note(self, db: AsyncSession, mentee_id: str, note_id: str) -> Optional[Note]:
        item = await self._get_note_item(db, mentee_id, note_id)
        return Note.model_validate(item) if item else None

    async def update_note(
        self,
        db: AsyncSession,
        mentee_id: str,
        note_id: str,
        content: str,
    ) -> Optional[Note]:
        """Replace the content and stamp updated_at. None if the note does not exist."""
        item = await self._get_note_item(db, mentee_id, note_id)
        if item is None:
            return None
        item.content = content
        item.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return Note.model_validate(item)

    async def delete_note(self, db: AsyncSession, mentee_id: str, note_id: str) -> None:
        item = await self._get_note_item(db, mentee_id, note_id)
        if item is not None:
            await db.delete(item)
            await db.flush()
            logger.info("Note %s of mentee %s deleted", note_id, mentee_id)

    async def _get_note_item(
        self,
        db: AsyncSession,
        mentee_id: str,
        note_id: str,
    ) -> Optional[MenteeItem]:
        return await db.get(
            MenteeItem,
            (mentee_key(mentee_id).serialize(), note_key(note_id).serialize()),
        )


mentee_service = MenteeService()
