"""JWT issuance and bearer-token dependencies.

Tokens are stateless: nothing is stored server-side, so a token stays valid
until it expires.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

import config
from domain.model.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(user: User) -> str:
    """Create JWT access token carrying the user's id and email."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "userId": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + config.JWT_EXPIRATION,
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify signature and expiry. Return the claims, or None if the token is unusable."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None
    if not payload.get("userId"):
        return None
    return payload


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Resolve the authenticated user id. Raises 401 if the token is missing or invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload["userId"]
