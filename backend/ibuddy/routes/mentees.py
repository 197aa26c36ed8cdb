"""
iBuddy Backend — Mentee & Note Routes
=======================================

What:  Thin handlers over MenteeService: authenticate, load, authorize, write.

Visibility:
    Buddies see and act on their own mentees only; every other role sees all
    mentees. Mentee records are changed by staff (can_user_mutate_mentee),
    except the status, which the assigned buddy may also set.
    Notes can be added by anyone who can see the mentee, and edited or
    removed by their author or by staff (can_user_mutate_note).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.auth.dependencies import get_current_user
from ibuddy.database import get_db_session
from ibuddy.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ibuddy.models.user import Role
from ibuddy.schemas.common import ErrorResponse
from ibuddy.schemas.mentee import (
    Mentee,
    MenteeCreate,
    MenteeDetail,
    MenteeForm,
    Note,
    NoteForm,
    StatusForm,
)
from ibuddy.schemas.user import User
from ibuddy.services.authorization import can_user_mutate_mentee, can_user_mutate_note
from ibuddy.services.mentee_service import mentee_service
from ibuddy.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/mentees",
    tags=["Mentees"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def _is_assigned_buddy(user: User, mentee: Mentee) -> bool:
    return mentee.buddy_id == user.id


def _require_mutate(user: User) -> None:
    if not can_user_mutate_mentee(user):
        raise PermissionDeniedError("Buddies can not change mentee records")


async def _get_visible_mentee(db: AsyncSession, user: User, mentee_id: str) -> Mentee:
    mentee = await mentee_service.get_mentee_by_id(db, mentee_id)
    if mentee is None:
        raise NotFoundError(resource="mentee", resource_id=mentee_id)
    if user.role == Role.BUDDY and not _is_assigned_buddy(user, mentee):
        raise PermissionDeniedError("You can only access your own mentees")
    return mentee


async def _resolve_buddy_id(db: AsyncSession, buddy_email: str) -> str:
    buddy = await user_service.get_buddy_by_email(db, buddy_email)
    if buddy is None:
        raise ValidationError("Buddy does not exist or is no longer active", field="buddy_email")
    return buddy.id


# ── Mentees ───────────────────────────────────────────────────────────────


@router.get("", response_model=List[Mentee])
async def list_mentees(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[Mentee]:
    if user.role == Role.BUDDY:
        return await mentee_service.get_mentee_list_items(db, user.id)
    return await mentee_service.get_all_mentees(db)


@router.post("", response_model=Mentee, status_code=status.HTTP_201_CREATED)
async def create_mentee(
    body: MenteeForm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Mentee:
    _require_mutate(user)
    if not await mentee_service.is_email_unique(db, body.email):
        raise ValidationError("A mentee with this email already exists", field="email")
    buddy_id = await _resolve_buddy_id(db, body.buddy_email)
    fields = body.model_dump(exclude={"buddy_email"})
    return await mentee_service.create_mentee(db, MenteeCreate(buddy_id=buddy_id, **fields))


@router.get("/{mentee_id}", response_model=MenteeDetail)
async def get_mentee(
    mentee_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MenteeDetail:
    mentee = await _get_visible_mentee(db, user, mentee_id)
    notes = await mentee_service.get_notes_of_mentee(db, mentee_id)
    return MenteeDetail(mentee=mentee, notes=notes)


@router.put("/{mentee_id}", response_model=Mentee)
async def update_mentee(
    mentee_id: str,
    body: MenteeForm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Mentee:
    _require_mutate(user)
    existing = await _get_visible_mentee(db, user, mentee_id)
    if body.email != existing.email and not await mentee_service.is_email_unique(db, body.email):
        raise ValidationError("A mentee with this email already exists", field="email")
    buddy_id = await _resolve_buddy_id(db, body.buddy_email)
    fields = body.model_dump(exclude={"buddy_email"})
    # the form carries no status; keep the current one
    updated = Mentee(id=existing.id, buddy_id=buddy_id, status=existing.status, **fields)
    return await mentee_service.update_mentee(db, updated)


@router.patch("/{mentee_id}/status", response_model=Mentee)
async def update_mentee_status(
    mentee_id: str,
    body: StatusForm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Mentee:
    mentee = await _get_visible_mentee(db, user, mentee_id)
    if not (can_user_mutate_mentee(user) or _is_assigned_buddy(user, mentee)):
        raise PermissionDeniedError("You can not change the status of this mentee")
    updated = await mentee_service.update_mentee_status(db, mentee_id, body.status)
    if updated is None:
        raise NotFoundError(resource="mentee", resource_id=mentee_id)
    return updated


@router.delete("/{mentee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mentee(
    mentee_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    _require_mutate(user)
    await _get_visible_mentee(db, user, mentee_id)
    await mentee_service.delete_mentee(db, mentee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Notes ─────────────────────────────────────────────────────────────────


async def _get_mutable_note(db: AsyncSession, user: User, mentee_id: str, note_id: str) -> Note:
    await _get_visible_mentee(db, user, mentee_id)
    note = await mentee_service.get_note(db, mentee_id, note_id)
    if note is None:
        raise NotFoundError(resource="note", resource_id=note_id)
    if not can_user_mutate_note(user, note):
        raise PermissionDeniedError("You can only change your own notes")
    return note


@router.post("/{mentee_id}/notes", response_model=Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    mentee_id: str,
    body: NoteForm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Note:
    await _get_visible_mentee(db, user, mentee_id)
    return await mentee_service.create_note(db, mentee_id, body.content, author_id=user.id)


@router.put("/{mentee_id}/notes/{note_id}", response_model=Note)
async def update_note(
    mentee_id: str,
    note_id: str,
    body: NoteForm,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Note:
    await _get_mutable_note(db, user, mentee_id, note_id)
    updated = await mentee_service.update_note(db, mentee_id, note_id, body.content)
    if updated is None:
        raise NotFoundError(resource="note", resource_id=note_id)
    return updated


@router.delete("/{mentee_id}/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    mentee_id: str,
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await _get_mutable_note(db, user, mentee_id, note_id)
    await mentee_service.delete_note(db, mentee_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
