"""JWT token handling"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from kanban_boards.config import settings
from kanban_boards.dependencies import get_name_lookup, get_user_repository
from kanban_boards.models.user import User
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.services.activity import NameLookup

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

# JWT Configuration
ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(tz=timezone.utc) + expires_delta
    else:
        expire = datetime.now(tz=timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


def user_from_claims(payload: dict) -> User:
    return User(
        user_id=payload["sub"],
        email=(payload.get("email") or "").lower(),
        first_name=payload.get("given_name") or "",
        last_name=payload.get("family_name") or "",
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository),
    names: NameLookup = Depends(get_name_lookup),
) -> User:
    """Get current user from JWT token, registering it on first sight"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(credentials.credentials) if credentials else None
    if payload is None or not payload.get("sub"):
        raise credentials_exception

    user = users.find_by_id(payload["sub"])
    claimed = user_from_claims(payload)
    if user is None or (claimed.email and claimed != user):
        user = users.save(claimed)
        names.forget_user(user.user_id)
        logger.info(f"User registered from token: {user.user_id}")
    return user
