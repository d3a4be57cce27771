"""Access token verification.

Tokens are issued by the identity service; this module only decodes them.
``create_access_token`` exists for local development and tests.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

import jwt

from parkspot.config import settings
from parkspot.timeutils import utcnow


class InvalidTokenError(Exception):
    """Raised when a token cannot be decoded or lacks a user id."""


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    is_admin: bool = False


def create_access_token(
    user_id: UUID, is_admin: bool = False, expires_in: Optional[timedelta] = timedelta(days=1)
) -> str:
    payload = {"id": str(user_id), "isAdmin": is_admin}
    if expires_in is not None:
        payload["exp"] = utcnow() + expires_in
    return jwt.encode(payload, settings.JWT_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.JWT_KEY, algorithms=[settings.JWT_ALGORITHM])
        return CurrentUser(id=UUID(str(payload["id"])), is_admin=bool(payload.get("isAdmin")))
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        raise InvalidTokenError(str(exc)) from exc
