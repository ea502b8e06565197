"""
Project and assignment models.

A project is client work users can log time against. A user only sees a
project on their timesheet while a ``UserProject`` assignment links them.
"""

from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from timesheets.fastapi.dependencies.database import Base
from timesheets.fastapi.core.utils import utcnow


class AssignmentStatus(str, Enum):
    """Lifecycle of a user-project assignment."""
    ACTIVE = "active"
    COMPLETED = "completed"
    REMOVED = "removed"


class Project(Base):
    """
    Project model.

    Attributes:
        id: Unique identifier
        client_name: Client the work is for
        project_name: Human-readable project name
        work_type: Kind of work (Development, DevOps, ...)
        location: Where the work happens (Remote, Office, ...)
        created_at: Record creation timestamp
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)

    client_name = Column(String(100), nullable=False, doc="Client name")
    project_name = Column(String(100), nullable=False, index=True, doc="Project name")
    work_type = Column(String(50), nullable=False, doc="Type of work")
    location = Column(String(100), nullable=False, doc="Work location")

    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        doc="Record creation timestamp"
    )

    # Relationships
    assignments = relationship("UserProject", back_populates="project")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, client='{self.client_name}', name='{self.project_name}')>"

    def __str__(self) -> str:
        return f"{self.client_name} - {self.project_name}"


class UserProject(Base):
    """
    Assignment of a project to a user.

    One row per (user, project). Status moves from active to either
    completed or removed and never back.
    """

    __tablename__ = "user_projects"
    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_user_projects_user_project"),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        doc="Assigned user"
    )

    project_id = Column(
        Integer,
        ForeignKey("projects.id"),
        nullable=False,
        index=True,
        doc="Assigned project"
    )

    status = Column(
        SQLEnum(AssignmentStatus, name="assignment_status", values_callable=lambda enum: [m.value for m in enum]),
        nullable=False,
        default=AssignmentStatus.ACTIVE,
        doc="active, completed or removed"
    )

    assigned_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        doc="When the assignment was made"
    )

    # Relationships
    user = relationship("User", back_populates="assignments")
    project = relationship("Project", back_populates="assignments")

    def __repr__(self) -> str:
        return f"<UserProject(user_id={self.user_id}, project_id={self.project_id}, status={self.status})>"

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE
