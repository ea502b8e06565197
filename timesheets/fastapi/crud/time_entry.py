"""
TimeEntry CRUD operations.

This module provides database operations for clock sessions: clocking in
to an assigned project, clocking out with duration accounting, and the
per-user listings of open and past sessions.
"""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from timesheets.fastapi.core.exceptions import Conflict, Forbidden, InvalidState, NotFound
from timesheets.fastapi.core.utils import elapsed_minutes, utcnow
from timesheets.fastapi.crud.project import get_active_assignment
from timesheets.fastapi.dependencies.database import unit_of_work
from timesheets.fastapi.models.time_entry import TimeEntry, TimeEntryStatus

logger = logging.getLogger(__name__)


class TimeEntryCRUD:
    """CRUD operations for TimeEntry model."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def clock_in(self, user_id: int, project_id: int, now: Optional[datetime] = None) -> TimeEntry:
        """
        Open a clock session for a user on a project.

        Args:
            user_id: Caller's user id
            project_id: Project to clock in to
            now: Clock-in instant (naive UTC); defaults to the current time

        Returns:
            Created TimeEntry instance (status active)

        Raises:
            Forbidden: If the project is not actively assigned to the user
            Conflict: If the user already has an open session on the project
        """
        if not get_active_assignment(self.db, user_id, project_id):
            raise Forbidden("Project is not assigned to you")

        if self.get_open_entry(user_id, project_id):
            raise Conflict("Already clocked in to this project")

        now = now or utcnow()
        db_entry = TimeEntry(
            user_id=user_id,
            project_id=project_id,
            clock_in=now,
            date=now.date(),
            status=TimeEntryStatus.ACTIVE
        )

        try:
            with unit_of_work(self.db, "clock in"):
                self.db.add(db_entry)
        except IntegrityError:
            # Another request opened the session between the check and the insert
            raise Conflict("Already clocked in to this project")
        self.db.refresh(db_entry)

        logger.info("User %s clocked in to project %s (entry %s)", user_id, project_id, db_entry.id)
        return db_entry

    def clock_out(self, entry_id: int, caller_user_id: int, now: Optional[datetime] = None) -> TimeEntry:
        """
        Close an open clock session.

        The duration is the number of whole minutes between clock-in and
        clock-out; a partial minute is dropped and it is never negative.
        The entry keeps its clock-in date even when the session crosses
        midnight.

        Raises:
            NotFound: If the entry does not exist
            Forbidden: If the entry belongs to another user
            InvalidState: If the entry is already closed
        """
        db_entry = self.get_time_entry(entry_id)
        if not db_entry:
            raise NotFound("Time entry not found")

        if db_entry.user_id != caller_user_id:
            raise Forbidden("Time entry belongs to another user")

        if db_entry.status != TimeEntryStatus.ACTIVE:
            raise InvalidState("Time entry is not active")

        now = now or utcnow()
        with unit_of_work(self.db, "clock out"):
            db_entry.clock_out = now
            db_entry.duration_minutes = elapsed_minutes(db_entry.clock_in, now)
            db_entry.status = TimeEntryStatus.COMPLETED
        self.db.refresh(db_entry)

        logger.info(
            "User %s clocked out of project %s (entry %s, %s min)",
            db_entry.user_id, db_entry.project_id, db_entry.id, db_entry.duration_minutes
        )
        return db_entry

    def get_time_entry(self, entry_id: int) -> Optional[TimeEntry]:
        """
        Get time entry by ID.

        Returns:
            TimeEntry instance or None if not found
        """
        return self.db.query(TimeEntry).filter(TimeEntry.id == entry_id).first()

    def get_open_entry(self, user_id: int, project_id: int) -> Optional[TimeEntry]:
        """Get the open session of a user on a project, if any."""
        return (self.db.query(TimeEntry)
                .filter(TimeEntry.user_id == user_id,
                        TimeEntry.project_id == project_id,
                        TimeEntry.status == TimeEntryStatus.ACTIVE)
                .first())

    def get_active_entries(self, user_id: int) -> List[TimeEntry]:
        """
        Get a user's open sessions, newest first.

        Each entry has its project loaded so ``project_name`` and
        ``client_name`` resolve without extra queries.
        """
        return (self.db.query(TimeEntry)
                .options(joinedload(TimeEntry.project))
                .filter(TimeEntry.user_id == user_id,
                        TimeEntry.status == TimeEntryStatus.ACTIVE)
                .order_by(desc(TimeEntry.created_at), desc(TimeEntry.id))
                .all())

    def get_user_time_entries(self, user_id: int, entry_date: Optional[date] = None) -> List[TimeEntry]:
        """
        Get all of a user's sessions, newest first.

        Args:
            user_id: Owner of the entries
            entry_date: If given, only entries whose clock-in date matches exactly

        Returns:
            List of TimeEntry instances
        """
        query = (self.db.query(TimeEntry)
                 .options(joinedload(TimeEntry.project))
                 .filter(TimeEntry.user_id == user_id))

        if entry_date:
            query = query.filter(TimeEntry.date == entry_date)

        return query.order_by(desc(TimeEntry.created_at), desc(TimeEntry.id)).all()


# Convenience functions
def clock_in(db: Session, user_id: int, project_id: int, now: Optional[datetime] = None) -> TimeEntry:
    """Open a clock session."""
    return TimeEntryCRUD(db).clock_in(user_id, project_id, now)


def clock_out(db: Session, entry_id: int, caller_user_id: int, now: Optional[datetime] = None) -> TimeEntry:
    """Close a clock session."""
    return TimeEntryCRUD(db).clock_out(entry_id, caller_user_id, now)


def get_time_entry(db: Session, entry_id: int) -> Optional[TimeEntry]:
    """Get time entry by ID."""
    return TimeEntryCRUD(db).get_time_entry(entry_id)


def get_active_entries(db: Session, user_id: int) -> List[TimeEntry]:
    """Get a user's open sessions."""
    return TimeEntryCRUD(db).get_active_entries(user_id)


def get_user_time_entries(db: Session, user_id: int, entry_date: Optional[date] = None) -> List[TimeEntry]:
    """Get a user's sessions, optionally for one date."""
    return TimeEntryCRUD(db).get_user_time_entries(user_id, entry_date)
