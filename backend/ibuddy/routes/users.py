"""
iBuddy Backend — User Routes
==============================

GET    /api/users                          list users (staff only)
POST   /api/users                          create a user (staff only)
GET    /api/users/{user_id}/can-delete     preview the deletion decision
DELETE /api/users/{user_id}                delete a user if the rules allow it

Deletion runs through UserService.can_user_delete_user; a denial comes back
as 403 with the rule's reason as the message.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.auth.dependencies import require_staff
from ibuddy.database import get_db_session
from ibuddy.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ibuddy.models.user import Role
from ibuddy.schemas.common import ErrorResponse
from ibuddy.schemas.user import DeleteUserResponse, User, UserCreate
from ibuddy.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


async def _get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await user_service.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError(resource="user", resource_id=user_id)
    return user


@router.get("", response_model=List[User])
async def list_users(
    _: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db_session),
) -> List[User]:
    return await user_service.get_user_list_items(db)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_user(
    body: UserCreate,
    actor: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Staff create accounts below their own role; admins may also create admins."""
    if body.role >= actor.role and actor.role != Role.ADMIN:
        raise PermissionDeniedError("You can only create users with a lower role than you")
    if not await user_service.is_email_unique(db, body.email):
        raise ValidationError("A user with this email already exists", field="email")
    return await user_service.create_user(db, body)


@router.get("/{user_id}/can-delete", response_model=DeleteUserResponse)
async def can_delete_user(
    user_id: str,
    actor: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteUserResponse:
    target = await _get_user_or_404(db, user_id)
    decision = await user_service.can_user_delete_user(db, actor, target)
    return DeleteUserResponse(can_delete=decision.allowed, reason=decision.reason)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: str,
    actor: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    target = await _get_user_or_404(db, user_id)
    decision = await user_service.can_user_delete_user(db, actor, target)
    if not decision:
        raise PermissionDeniedError(decision.reason, context={"user_id": user_id})
    await user_service.delete_user(db, target.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
