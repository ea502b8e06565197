"""
TimeEntry model for clock-in/clock-out sessions.

Each row is one session of a user on a project: opened by clock-in,
closed by clock-out, and later folded into a weekly timesheet.
"""

from enum import Enum
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Index, text, Enum as SQLEnum
from sqlalchemy.orm import relationship

from timesheets.fastapi.dependencies.database import Base
from timesheets.fastapi.core.utils import utcnow


class TimeEntryStatus(str, Enum):
    """Enum for time entry statuses."""
    ACTIVE = "active"
    COMPLETED = "completed"


class TimeEntry(Base):
    """
    Time entry model for a single clock session.

    Attributes:
        id: Unique identifier
        user_id: Foreign key to User model
        project_id: Foreign key to Project model
        clock_in: When the session started
        clock_out: When the session ended (NULL while active)
        duration_minutes: Whole minutes worked (NULL while active)
        date: Calendar date of clock_in; never recalculated from clock_out
        status: active or completed
        synced_at: When the session was folded into a timesheet (NULL if not yet)
        created_at: Record creation timestamp

    Relationships:
        user: The user this entry belongs to
        project: The project time was logged against
    """

    __tablename__ = "time_entries"
    __table_args__ = (
        # At most one open session per user and project
        Index(
            "uq_time_entries_active_session",
            "user_id",
            "project_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'")
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        doc="Reference to the user"
    )

    project_id = Column(
        Integer,
        ForeignKey("projects.id"),
        nullable=False,
        index=True,
        doc="Reference to the project"
    )

    clock_in = Column(DateTime, nullable=False, doc="Session start")
    clock_out = Column(DateTime, nullable=True, doc="Session end")

    duration_minutes = Column(
        Integer,
        nullable=True,
        doc="floor((clock_out - clock_in) / 60s)"
    )

    date = Column(
        Date,
        nullable=False,
        index=True,
        doc="Calendar date of clock_in"
    )

    status = Column(
        SQLEnum(TimeEntryStatus, name="time_entry_status", values_callable=lambda enum: [m.value for m in enum]),
        nullable=False,
        default=TimeEntryStatus.ACTIVE,
        index=True,
        doc="active or completed"
    )

    synced_at = Column(
        DateTime,
        nullable=True,
        default=None,
        doc="When this session was added to a weekly timesheet"
    )

    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        doc="Record creation timestamp"
    )

    # Relationships
    user = relationship("User", back_populates="time_entries")
    project = relationship("Project")

    def __repr__(self) -> str:
        """String representation of TimeEntry."""
        return (
            f"<TimeEntry(id={self.id}, user_id={self.user_id}, project_id={self.project_id}, "
            f"status={self.status}, clock_in={self.clock_in})>"
        )

    @property
    def is_active(self) -> bool:
        """Check if the session is still open."""
        return self.status == TimeEntryStatus.ACTIVE

    @property
    def project_name(self):
        return self.project.project_name if self.project else None

    @property
    def client_name(self):
        return self.project.client_name if self.project else None
