"""
JWT authentication utilities for the FastAPI application.

This module provides functions for creating and validating JWT tokens
that identify the calling user and their role.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import HTTPException, status

from timesheets.fastapi.core.init_settings import global_settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary containing token payload data (sub, username, role)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token as string
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": now
    })

    return jwt.encode(
        to_encode,
        global_settings.JWT_SECRET_KEY,
        algorithm=global_settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT access token.

    Args:
        token: JWT token string to verify

    Returns:
        Dictionary containing decoded token payload

    Raises:
        HTTPException: If token is invalid, expired, or malformed
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            global_settings.JWT_SECRET_KEY,
            algorithms=[global_settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise credentials_exception

    if payload.get("sub") is None:
        raise credentials_exception

    return payload


def create_user_token(user_id: int, username: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT token for a user of either role.

    Example:
        >>> token = create_user_token(2, "john", "user")
        >>> verify_access_token(token)["role"]
        'user'
    """
    token_data = {
        "sub": str(user_id),
        "username": username,
        "role": role
    }

    return create_access_token(token_data, expires_delta)
