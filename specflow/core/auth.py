# specflow/core/auth.py
"""
Bearer token authentication.

Tokens are HS256 JWTs signed with AUTH_SECRET whose subject is the user id.
Routes depend on get_current_user (401) or require_admin (403).
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, Request

from specflow.core.config import settings
from specflow.core.exceptions import AuthenticationError, PermissionDeniedError
from specflow.core.logging import log
from specflow.models import User


def _secret() -> str:
    if not settings.auth.secret:
        raise AuthenticationError("Authentication is not configured")
    return settings.auth.secret


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = expires_minutes if expires_minutes is not None else settings.auth.token_ttl_minutes
    return jwt.encode(
        {"sub": str(user_id), "iat": now, "exp": now + timedelta(minutes=ttl)},
        _secret(),
        algorithm=settings.auth.algorithm,
    )


def decode_access_token(token: str) -> str:
    """
    Returns:
        The user id carried in the token subject.

    Raises:
        AuthenticationError: expired, malformed or wrongly signed token
    """
    try:
        payload = jwt.decode(token, _secret(), algorithms=[settings.auth.algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Token is invalid")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token is invalid")
    return user_id


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError("Authentication required")
    token = header[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Authentication required")
    return token


async def get_current_user(request: Request) -> User:
    user_id = decode_access_token(_bearer_token(request))
    try:
        user = await User.get(PydanticObjectId(user_id))
    except InvalidId:
        user = None
    if user is None:
        log("AUTH", f"Token for unknown user {user_id}")
        raise AuthenticationError("User not found")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        log("AUTH", f"Admin access denied for {user.email}")
        raise PermissionDeniedError("Admin access required")
    return user
