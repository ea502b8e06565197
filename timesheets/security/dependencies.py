"""
Authentication dependencies for FastAPI.

This module provides dependency functions for protecting FastAPI routes
and resolving the authenticated caller. The caller is passed explicitly
to the engines as a user id; nothing is kept in global state.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from timesheets.fastapi.dependencies.database import get_sync_db
from timesheets.fastapi.models.user import User, UserRole
from timesheets.fastapi.crud.user import get_user
from timesheets.security.auth import verify_access_token


# HTTP Bearer token scheme
security = HTTPBearer()


async def get_current_user_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """Extract and validate the JWT from the Authorization header."""
    return verify_access_token(credentials.credentials)


def get_current_user(
    token_data: dict = Depends(get_current_user_token),
    db: Session = Depends(get_sync_db)
) -> User:
    """
    Get the current authenticated user (any role).

    Raises:
        HTTPException: 401 if the token does not name an existing user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = int(token_data.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    user = get_user(db, user_id)
    if user is None:
        raise credentials_exception

    return user


def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get the current user and require the admin role.

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin access required."
        )

    return current_user


# Convenience dependencies for different permission levels
RequireUser = Depends(get_current_user)
RequireAdmin = Depends(get_current_admin)
