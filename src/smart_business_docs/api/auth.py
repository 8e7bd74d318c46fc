"""Session tokens: issue and resolve the signed-in user id.

The identity provider is external; this service only verifies the HS256
bearer tokens it hands out and reads the user id from the `sub` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

from ..config import Settings
from .dependencies import get_app_settings

logger = get_logger()
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, settings: Settings, expires_min: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_min if expires_min is not None else settings.jwt_expires_min)
    payload = {"sub": user_id, "iat": now, "exp": expires}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Optional[str]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.warning("session_token_invalid", error=str(e))
        return None
    return payload.get("sub")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings)
) -> str:
    user_id = decode_access_token(credentials.credentials, settings) if credentials else None
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user_id
