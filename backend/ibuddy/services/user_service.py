"""
iBuddy Backend — Identity Store
=================================

What:  Users, their separately stored password hashes, login verification
       and the "may this user be deleted" check.
How:   Like every store, methods receive the AsyncSession to use and never
       commit on their own.

Identity:
    users.id and passwords.user_id are both "User#<lowercased email>", so a
    user can be found from an email without any index.

Login Privacy:
    verify_login answers None both for an unknown email and for a wrong
    password. Callers must not try to tell the two apart.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.config import settings
from ibuddy.exceptions import InvariantViolationError
from ibuddy.keys import user_id_for_email
from ibuddy.models.user import PasswordRecord, UserRecord
from ibuddy.schemas.user import User, UserCreate, UserUpdate
from ibuddy.services import authorization
from ibuddy.services.asset_service import AssetService, asset_service
from ibuddy.services.mentee_service import MenteeService, mentee_service
from ibuddy.services.password_service import PasswordHasher

logger = logging.getLogger(__name__)


def _user_columns(fields: UserUpdate) -> Dict[str, Any]:
    columns = fields.model_dump(include=set(UserUpdate.model_fields))
    columns["email"] = fields.email.lower()
    columns["role"] = fields.role.value
    return columns


class UserService:
    """
    Identity store.

    Collaborators (injected so tests can swap them):
        hasher          bcrypt hashing and verification
        mentees/assets  ownership counts consulted before deleting a user
    """

    def __init__(
        self,
        hasher: Optional[PasswordHasher] = None,
        mentees: Optional[MenteeService] = None,
        assets: Optional[AssetService] = None,
    ):
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)
        self.mentees = mentees or mentee_service
        self.assets = assets or asset_service

    # ── Lookups ───────────────────────────────────────────────────────────

    async def get_user_list_items(self, db: AsyncSession) -> List[User]:
        result = await db.execute(
            select(UserRecord).order_by(UserRecord.last_name, UserRecord.first_name)
        )
        return [User.model_validate(record) for record in result.scalars().all()]

    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> Optional[User]:
        record = await db.get(UserRecord, user_id)
        return User.model_validate(record) if record else None

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await self.get_user_by_id(db, user_id_for_email(email))

    async def is_email_unique(self, db: AsyncSession, email: str) -> bool:
        return await self.get_user_by_email(db, email) is None

    async def get_buddy_by_id(self, db: AsyncSession, user_id: str) -> Optional[User]:
        """The user, but only while their agreement is still running."""
        buddy = await self.get_user_by_id(db, user_id)
        if buddy is None or buddy.agreement_end_date <= date.today():
            return None
        return buddy

    async def get_buddy_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await self.get_buddy_by_id(db, user_id_for_email(email))

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_user(self, db: AsyncSession, new_user: UserCreate) -> User:
        """
        Hash the password, write the password record, then the user record,
        and return the user as read back from the store.

        Raises:
            InvariantViolationError: the user cannot be read back after the write
        """
        columns = _user_columns(new_user)
        user_id = user_id_for_email(columns["email"])

        await db.merge(PasswordRecord(user_id=user_id, password=self.hasher.hash(new_user.password)))
        await db.merge(UserRecord(id=user_id, **columns))
        await db.flush()

        user = await self.get_user_by_id(db, user_id)
        if user is None:
            raise InvariantViolationError(
                message="User not found after being created",
                context={"user_id": user_id},
            )
        logger.info("User %s created with role %s", user_id, user.role.name)
        return user

    async def update_user(self, db: AsyncSession, updated_user: UserUpdate) -> User:
        """Replace the whole user record identified by the (lowercased) email."""
        columns = _user_columns(updated_user)
        user_id = user_id_for_email(columns["email"])
        record = await db.merge(UserRecord(id=user_id, **columns))
        await db.flush()
        return User.model_validate(record)

    async def delete_user(self, db: AsyncSession, user_id: str) -> None:
        """
        Delete the password record and the user record.

        Two independent deletes; a failure between them is not compensated.
        """
        for model in (PasswordRecord, UserRecord):
            record = await db.get(model, user_id)
            if record is not None:
                await db.delete(record)
        await db.flush()
        logger.info("User %s deleted", user_id)

    async def delete_user_by_email(self, db: AsyncSession, email: str) -> None:
        await self.delete_user(db, user_id_for_email(email))

    # ── Authentication & Authorization ────────────────────────────────────

    async def verify_login(self, db: AsyncSession, email: str, password: str) -> Optional[User]:
        # all emails are stored lowercased
        user_id = user_id_for_email(email)
        stored = await db.get(PasswordRecord, user_id)
        if stored is None or not self.hasher.verify(password, stored.password):
            return None
        return await self.get_user_by_id(db, user_id)

    async def can_user_delete_user(
        self,
        db: AsyncSession,
        actor: User,
        target: User,
    ) -> authorization.Decision:
        """Gather the target's mentee and asset counts and apply the deletion rules."""
        mentee_count = await self.mentees.get_mentee_count(db, target.id)
        asset_count = await self.assets.get_user_asset_count(db, target.id)
        decision = authorization.can_user_delete_user(
            actor,
            target,
            mentee_count=mentee_count,
            asset_count=asset_count,
        )
        if not decision:
            logger.info("%s may not delete %s: %s", actor.id, target.id, decision.reason)
        return decision


user_service = UserService()
