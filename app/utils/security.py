"""
Security utilities and authentication
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import settings
from app.core.errors import AuthenticationError

# auto_error=False so a missing header becomes 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Identity carried by a verified token"""
    id: int
    first_name: str
    last_name: str
    username: str


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Sign a token for a user row"""
    minutes = settings.JWT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    payload = {
        "id": user["id"],
        "first_name": user["first_name"],
        "last_name": user["last_name"],
        "username": user["username"],
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    try:
        return CurrentUser(
            id=int(claims["id"]),
            first_name=claims["first_name"],
            last_name=claims["last_name"],
            username=claims["username"],
        )
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Verify the bearer token on protected routes"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token required")
    return decode_access_token(credentials.credentials)
