"""
User CRUD operations.

This module provides database operations for user accounts. Users are
created by an admin (or at start-up) and are not updated or deleted here.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from timesheets.fastapi.core.exceptions import Conflict
from timesheets.fastapi.core.utils import normalize_username
from timesheets.fastapi.dependencies.database import unit_of_work
from timesheets.fastapi.models.user import User, UserRole
from timesheets.fastapi.schemas.user import UserCreate
from timesheets.security.password import hash_password

logger = logging.getLogger(__name__)


class UserCRUD:
    """CRUD operations for User model."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def create_user(self, user_data: UserCreate) -> User:
        """
        Create a new user.

        Username is normalized (accents and spaces removed, lowercased)
        before the uniqueness check.

        Args:
            user_data: Username, name, role and plaintext password

        Returns:
            Created User instance

        Raises:
            Conflict: If the normalized username already exists
        """
        normalized_username = normalize_username(user_data.username)

        if self.get_user_by_username(normalized_username):
            raise Conflict(f"Username already registered (normalized to '{normalized_username}')")

        db_user = User(
            username=normalized_username,
            name=user_data.name.strip(),
            role=user_data.role,
            password_hash=hash_password(user_data.password)
        )

        try:
            with unit_of_work(self.db, "create user"):
                self.db.add(db_user)
        except IntegrityError:
            raise Conflict(f"Username already registered (normalized to '{normalized_username}')")
        self.db.refresh(db_user)

        logger.info("Created %s account '%s' (id=%s)", db_user.role.value, db_user.username, db_user.id)
        return db_user

    def get_user(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User instance or None if not found
        """
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Returns:
            User instance or None if not found
        """
        return self.db.query(User).filter(User.username == username).first()

    def get_users(self, role: Optional[UserRole] = None) -> List[User]:
        """List users, optionally restricted to one role, ordered by id."""
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.id).all()

    def get_user_count(self, role: Optional[UserRole] = None) -> int:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.count()


# Convenience functions
def create_user(db: Session, user_data: UserCreate) -> User:
    """Create a new user."""
    return UserCRUD(db).create_user(user_data)


def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get user by ID."""
    return UserCRUD(db).get_user(user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get user by username (normalized the same way as on creation)."""
    return UserCRUD(db).get_user_by_username(normalize_username(username))


def get_users(db: Session, role: Optional[UserRole] = None) -> List[User]:
    """Get list of users."""
    return UserCRUD(db).get_users(role)


def get_user_count(db: Session, role: Optional[UserRole] = None) -> int:
    """Count users, optionally by role."""
    return UserCRUD(db).get_user_count(role)
