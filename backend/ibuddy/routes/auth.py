"""
iBuddy Backend — Authentication Routes
========================================

POST /api/auth/login   exchange email + password for a bearer token
GET  /api/auth/me      the user the token belongs to
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.auth import jwt_handler
from ibuddy.auth.dependencies import get_current_user
from ibuddy.database import get_db_session
from ibuddy.exceptions import AuthenticationError
from ibuddy.schemas.common import ErrorResponse
from ibuddy.schemas.user import LoginRequest, TokenResponse, User
from ibuddy.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    """
    Verify the credentials and issue an access token.

    Unknown email and wrong password produce the same 401 so the endpoint
    cannot be used to probe which accounts exist.
    """
    user = await user_service.verify_login(db, body.email, body.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise AuthenticationError()
    return TokenResponse(access_token=jwt_handler.create_access_token(user.id), user=user)


@router.get("/me", response_model=User)
async def me(current_user: User = Depends(get_current_user)) -> User:
    return current_user
