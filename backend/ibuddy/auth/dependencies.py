"""FastAPI dependencies resolving the authenticated user of a request."""

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.auth import jwt_handler
from ibuddy.database import get_db_session
from ibuddy.exceptions import AuthenticationError, PermissionDeniedError
from ibuddy.keys import is_user_id
from ibuddy.models.user import Role
from ibuddy.schemas.user import User
from ibuddy.services.user_service import user_service

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid token") from exc

    user_id = payload.get("sub")
    if not is_user_id(user_id):
        raise AuthenticationError("Invalid token subject")

    user = await user_service.get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def require_staff(user: User = Depends(get_current_user)) -> User:
    """Any role above BUDDY."""
    if user.role == Role.BUDDY:
        raise PermissionDeniedError()
    return user
