"""
Timesheet and ProjectCompletion models.

A timesheet row holds one user's hours on one project for one week
(Sunday-start), split into seven day columns plus their total.
"""

from enum import Enum
from sqlalchemy import Column, Integer, Numeric, Date, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from timesheets.fastapi.dependencies.database import Base
from timesheets.fastapi.core.utils import WEEKDAYS, ZERO_HOURS, sum_hours, utcnow


class TimesheetStatus(str, Enum):
    """Enum for timesheet statuses."""
    ACTIVE = "active"
    COMPLETED = "completed"


def _hours_column(day: str) -> Column:
    return Column(
        Numeric(precision=6, scale=2),
        nullable=False,
        default=ZERO_HOURS,
        doc=f"Hours worked on {day}"
    )


class Timesheet(Base):
    """
    Weekly timesheet row.

    Unique per (user_id, project_id, week_start). ``total_hours`` always
    equals the sum of the seven day columns; use ``recalculate_total``
    after touching any of them.
    """

    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "project_id", "week_start", name="uq_timesheets_user_project_week"),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    week_start = Column(
        Date,
        nullable=False,
        index=True,
        doc="Sunday that begins the week"
    )

    sunday = _hours_column("sunday")
    monday = _hours_column("monday")
    tuesday = _hours_column("tuesday")
    wednesday = _hours_column("wednesday")
    thursday = _hours_column("thursday")
    friday = _hours_column("friday")
    saturday = _hours_column("saturday")

    total_hours = Column(
        Numeric(precision=7, scale=2),
        nullable=False,
        default=ZERO_HOURS,
        doc="Sum of the seven day columns"
    )

    status = Column(
        SQLEnum(TimesheetStatus, name="timesheet_status", values_callable=lambda enum: [m.value for m in enum]),
        nullable=False,
        default=TimesheetStatus.ACTIVE,
        index=True,
        doc="active, or completed once the project is closed out"
    )

    submitted_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        doc="Last submission timestamp"
    )

    # Relationships
    user = relationship("User", back_populates="timesheets")
    project = relationship("Project")

    def __repr__(self) -> str:
        return (
            f"<Timesheet(id={self.id}, user_id={self.user_id}, project_id={self.project_id}, "
            f"week_start='{self.week_start}', total={self.total_hours})>"
        )

    def hours_by_day(self) -> dict:
        """Day name -> hours for the seven day columns."""
        return {day: getattr(self, day) for day in WEEKDAYS}

    def recalculate_total(self) -> None:
        self.total_hours = sum_hours(self.hours_by_day())

    @property
    def client_name(self):
        return self.project.client_name if self.project else None

    @property
    def project_name(self):
        return self.project.project_name if self.project else None

    @property
    def work_type(self):
        return self.project.work_type if self.project else None

    @property
    def location(self):
        return self.project.location if self.project else None

    @property
    def user_name(self):
        return self.user.name if self.user else None


class ProjectCompletion(Base):
    """
    Audit record written each time a user completes a project.

    Immutable: rows are inserted once and never updated or deleted
    (except when the project itself is deleted).
    """

    __tablename__ = "project_completions"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    completion_date = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
        doc="When the project was completed"
    )

    total_hours_worked = Column(
        Numeric(precision=9, scale=2),
        nullable=False,
        default=ZERO_HOURS,
        doc="Sum of the active timesheet totals at completion time"
    )

    # Relationships
    user = relationship("User")
    project = relationship("Project")

    def __repr__(self) -> str:
        return (
            f"<ProjectCompletion(id={self.id}, user_id={self.user_id}, "
            f"project_id={self.project_id}, hours={self.total_hours_worked})>"
        )

    @property
    def client_name(self):
        return self.project.client_name if self.project else None

    @property
    def project_name(self):
        return self.project.project_name if self.project else None

    @property
    def work_type(self):
        return self.project.work_type if self.project else None

    @property
    def location(self):
        return self.project.location if self.project else None

    @property
    def user_name(self):
        return self.user.name if self.user else None
