"""
Authentication endpoints.

This module provides login for both roles and the current-user lookup.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheets.fastapi.core.init_settings import global_settings
from timesheets.fastapi.crud.user import get_user_by_username
from timesheets.fastapi.dependencies.database import get_sync_db
from timesheets.fastapi.models.user import User
from timesheets.fastapi.schemas.user import UserLogin, UserRead, TokenResponse
from timesheets.security.auth import create_user_token
from timesheets.security.dependencies import RequireUser
from timesheets.security.password import verify_password


router = APIRouter(tags=["authentication"])


@router.post("/login", response_model=TokenResponse, summary="Login")
async def login(
    user_login: UserLogin,
    db: Session = Depends(get_sync_db)
):
    """
    Authenticate a user or admin and return a JWT access token.

    **Process:**
    1. Look up the (normalized) username
    2. Verify the password
    3. Issue a token carrying the user id and role

    **Returns:**
    - **access_token**: JWT token for authenticated requests
    - **token_type**: Bearer token type
    - **expires_in**: Token lifetime in seconds
    - **user**: User information (without password)

    **Errors:**
    - **401**: Invalid credentials
    """
    user = get_user_by_username(db, user_login.username)
    if not user or not verify_password(user_login.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_user_token(user.id, user.username, user.role.value)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=global_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user)
    )


@router.get("/me", response_model=UserRead, summary="Current User")
async def read_current_user(current_user: User = RequireUser):
    """
    Get the authenticated caller's account.

    **Errors:**
    - **401**: Not authenticated
    """
    return current_user
