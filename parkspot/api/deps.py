"""Shared API dependencies."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from parkspot.config import settings
from parkspot.db.session import get_db
from parkspot.security import CurrentUser, InvalidTokenError, decode_access_token
from parkspot.services.locks import SlotLockRegistry

get_db_session = get_db

bearer_scheme = HTTPBearer(auto_error=False)


def get_slot_locks(request: Request) -> SlotLockRegistry:
    return request.app.state.slot_locks


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """Identify the caller from the auth cookie or a bearer token."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if credentials is not None:
        token = credentials.credentials

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You are not authenticated!",
        )
    try:
        return decode_access_token(token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token is not valid!",
        )


async def get_admin_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user
