"""
User model for people who track time.

Admins and regular users share one table and are told apart by ``role``.
"""

from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship

from timesheets.fastapi.dependencies.database import Base
from timesheets.fastapi.core.utils import utcnow


class UserRole(str, Enum):
    """Enum for user roles."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """
    User account.

    Attributes:
        id: Unique identifier
        username: Unique username for login
        name: Display name
        role: admin or user
        password_hash: Opaque password hash
        created_at: Account creation timestamp

    Relationships:
        assignments: Projects assigned to this user
        time_entries: Clock sessions of this user
        timesheets: Weekly hour rows of this user
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique username for login (3-50 characters)"
    )

    name = Column(
        String(100),
        nullable=False,
        doc="Display name shown in reports"
    )

    role = Column(
        SQLEnum(UserRole, name="user_role", values_callable=lambda enum: [m.value for m in enum]),
        nullable=False,
        default=UserRole.USER,
        doc="admin or user"
    )

    password_hash = Column(
        String(255),
        nullable=False,
        doc="Hashed password"
    )

    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        doc="Account creation timestamp"
    )

    # Relationships
    assignments = relationship("UserProject", back_populates="user")
    time_entries = relationship("TimeEntry", back_populates="user")
    timesheets = relationship("Timesheet", back_populates="user")

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"

    @property
    def is_admin(self) -> bool:
        """Check if this user has the admin role."""
        return self.role == UserRole.ADMIN
