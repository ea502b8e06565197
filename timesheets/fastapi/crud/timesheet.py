"""
Timesheet CRUD operations.

This module provides the weekly timesheet operations: additive saves,
per-user and admin listings, completing or removing a project from a
user's timesheet, and folding finished clock sessions into timesheet rows.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Tuple
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from timesheets.fastapi.core.exceptions import Conflict, Forbidden, NotFound
from timesheets.fastapi.core.utils import (
    MAX_DAY_HOURS,
    WEEKDAYS,
    ZERO_HOURS,
    added_hours,
    to_hours,
    utcnow,
    week_start_for,
    weekday_name,
)
from timesheets.fastapi.crud.project import get_active_assignment, get_assignment
from timesheets.fastapi.dependencies.database import unit_of_work
from timesheets.fastapi.models.project import AssignmentStatus
from timesheets.fastapi.models.time_entry import TimeEntry, TimeEntryStatus
from timesheets.fastapi.models.timesheet import ProjectCompletion, Timesheet, TimesheetStatus
from timesheets.fastapi.schemas.timesheet import SyncResult

logger = logging.getLogger(__name__)


class TimesheetCRUD:
    """CRUD operations for Timesheet and ProjectCompletion models."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def get_timesheet(self, user_id: int, project_id: int, week_start: date) -> Optional[Timesheet]:
        """Get the row for a (user, project, week), week already normalised."""
        return self.db.query(Timesheet).filter(
            Timesheet.user_id == user_id,
            Timesheet.project_id == project_id,
            Timesheet.week_start == week_start
        ).first()

    def _merge_hours(self, user_id: int, project_id: int, week_start: date,
                     hours: Mapping[str, Decimal]) -> Tuple[Timesheet, bool]:
        """
        Add ``hours`` into the (user, project, week) row, creating it if needed.

        Does not commit; the caller owns the transaction.

        Returns:
            (timesheet, created)

        Raises:
            Conflict: If a day would grow past what its column can hold
        """
        unknown = set(hours) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown day(s): {', '.join(sorted(unknown))}")

        db_timesheet = self.get_timesheet(user_id, project_id, week_start)
        created = db_timesheet is None

        current = {} if created else db_timesheet.hours_by_day()
        merged = {day: to_hours(current.get(day)) + to_hours(value) for day, value in hours.items()}
        too_large = sorted(day for day, value in merged.items() if value > MAX_DAY_HOURS)
        if too_large:
            raise Conflict(f"Hours for {', '.join(too_large)} would exceed {MAX_DAY_HOURS}")

        if created:
            db_timesheet = Timesheet(
                user_id=user_id,
                project_id=project_id,
                week_start=week_start,
                status=TimesheetStatus.ACTIVE,
                **{day: ZERO_HOURS for day in WEEKDAYS}
            )
            self.db.add(db_timesheet)

        for day, value in merged.items():
            setattr(db_timesheet, day, value)

        db_timesheet.recalculate_total()
        db_timesheet.submitted_at = utcnow()
        self.db.flush()

        return db_timesheet, created

    def save_timesheet(self, user_id: int, project_id: int, week_start: date,
                       hours: Mapping[str, Decimal]) -> Timesheet:
        """
        Add hours to a user's weekly timesheet for a project.

        Supplied days are added to what the row already holds, never
        overwritten: saving {monday: 3} then {monday: 2} leaves monday at 5.
        A missing row is created with unsupplied days at 0. ``week_start``
        may be any date of the week; it is moved back to its Sunday.

        Args:
            user_id: Owner of the timesheet
            project_id: Project the hours are for
            week_start: Any date in the target week
            hours: Day name -> hours to add

        Returns:
            The saved Timesheet row

        Raises:
            Forbidden: If the project is not actively assigned to the user
            Conflict: If a day would exceed MAX_DAY_HOURS
        """
        if not get_active_assignment(self.db, user_id, project_id):
            raise Forbidden("Project is not assigned to you")

        week_start = week_start_for(week_start)

        for attempt in range(2):
            try:
                with unit_of_work(self.db, "save timesheet"):
                    db_timesheet, created = self._merge_hours(user_id, project_id, week_start, hours)
                break
            except IntegrityError:
                # A concurrent save created the row first; merge into it instead
                if attempt:
                    raise Conflict("Timesheet was modified concurrently, please retry")
                logger.warning(
                    "Timesheet insert raced for user %s project %s week %s, merging",
                    user_id, project_id, week_start
                )

        self.db.refresh(db_timesheet)
        logger.info(
            "%s timesheet %s for user %s project %s week %s (total %s)",
            "Created" if created else "Updated", db_timesheet.id, user_id,
            project_id, week_start, db_timesheet.total_hours
        )
        return db_timesheet

    def get_user_timesheets(self, user_id: int, week_start: date) -> List[Timesheet]:
        """
        Get a user's rows for one week, across projects.

        Returns:
            List of Timesheet instances with their project loaded
        """
        return (self.db.query(Timesheet)
                .options(joinedload(Timesheet.project))
                .filter(Timesheet.user_id == user_id,
                        Timesheet.week_start == week_start_for(week_start))
                .order_by(Timesheet.project_id)
                .all())

    def get_all_timesheets(self, user_id: Optional[int] = None,
                           week_start: Optional[date] = None,
                           project_id: Optional[int] = None) -> List[Timesheet]:
        """
        Get timesheet rows for admin reports.

        Every filter that is supplied must match exactly; with no filters
        every row is returned. Newest weeks come first.
        """
        query = (self.db.query(Timesheet)
                 .options(joinedload(Timesheet.user), joinedload(Timesheet.project)))

        if user_id is not None:
            query = query.filter(Timesheet.user_id == user_id)

        if week_start is not None:
            query = query.filter(Timesheet.week_start == week_start_for(week_start))

        if project_id is not None:
            query = query.filter(Timesheet.project_id == project_id)

        return query.order_by(desc(Timesheet.week_start), Timesheet.user_id, Timesheet.project_id).all()

    def complete_project(self, user_id: int, project_id: int) -> Decimal:
        """
        Close out a project for a user.

        In one transaction: sums the user's active timesheet rows for the
        project, records a ProjectCompletion with that sum, marks the
        assignment completed and archives every timesheet row of the pair.
        Calling it again is allowed and records a completion of 0 hours.
        Only an active assignment changes status; a removed one stays
        removed, though the completion is still recorded.

        Returns:
            Total hours of the rows that were still active

        Raises:
            NotFound: If the project was never assigned to the user
        """
        assignment = get_assignment(self.db, user_id, project_id)
        if not assignment:
            raise NotFound("Project assignment not found")

        with unit_of_work(self.db, "complete project"):
            active_rows = (self.db.query(Timesheet)
                           .filter(Timesheet.user_id == user_id,
                                   Timesheet.project_id == project_id,
                                   Timesheet.status == TimesheetStatus.ACTIVE)
                           .with_for_update()
                           .all())
            total = sum((to_hours(row.total_hours) for row in active_rows), ZERO_HOURS)

            self.db.add(ProjectCompletion(
                user_id=user_id,
                project_id=project_id,
                completion_date=utcnow(),
                total_hours_worked=total
            ))
            if assignment.status == AssignmentStatus.ACTIVE:
                assignment.status = AssignmentStatus.COMPLETED

            archived = (self.db.query(Timesheet)
                        .filter(Timesheet.user_id == user_id,
                                Timesheet.project_id == project_id)
                        .update({Timesheet.status: TimesheetStatus.COMPLETED}))

        logger.info(
            "User %s completed project %s: %s hours, %d timesheet rows archived",
            user_id, project_id, total, archived
        )
        return total

    def remove_project(self, user_id: int, project_id: int) -> None:
        """
        Take a project off a user's timesheet.

        An active assignment is marked removed; a completed or already
        removed one is left as it is. Existing timesheet rows are kept.

        Raises:
            NotFound: If the project was never assigned to the user
        """
        assignment = get_assignment(self.db, user_id, project_id)
        if not assignment:
            raise NotFound("Project assignment not found")

        if assignment.status != AssignmentStatus.ACTIVE:
            logger.info(
                "Project %s is already %s for user %s, nothing to remove",
                project_id, assignment.status.value, user_id
            )
            return

        with unit_of_work(self.db, "remove project"):
            assignment.status = AssignmentStatus.REMOVED

        logger.info("User %s removed project %s from their timesheet", user_id, project_id)

    def get_project_completions(self) -> List[ProjectCompletion]:
        """Get every completion record, newest first."""
        return (self.db.query(ProjectCompletion)
                .options(joinedload(ProjectCompletion.user), joinedload(ProjectCompletion.project))
                .order_by(desc(ProjectCompletion.completion_date), desc(ProjectCompletion.id))
                .all())

    def sync_time_entries_to_timesheets(self) -> SyncResult:
        """
        Fold finished clock sessions into weekly timesheet rows.

        Takes every completed entry with a positive duration that has not
        been synced yet, sums its minutes per (user, project, week) and day
        of the clock-in date, converts each day's minutes to hours and adds
        them to the timesheet row. Hours are rounded on the day's running
        minute total (see ``added_hours``), so the result does not depend on
        how often the sync runs. Consumed entries are stamped with
        ``synced_at`` so a second run over the same data changes nothing.
        Assignments are not checked: sessions on completed or removed
        projects are still reconciled.

        Everything is committed at once or not at all.
        """
        for attempt in range(2):
            try:
                with unit_of_work(self.db, "sync time entries"):
                    result = self._sync_pending_entries()
                break
            except IntegrityError:
                if attempt:
                    raise Conflict("Timesheets were modified concurrently, please retry")
                logger.warning("Timesheet insert raced during sync, retrying")

        logger.info(
            "Synced %d time entries into %d timesheet rows",
            result.entries_synced, result.timesheets_updated
        )
        return result

    def _sync_pending_entries(self) -> SyncResult:
        entries = (self.db.query(TimeEntry)
                   .filter(TimeEntry.status == TimeEntryStatus.COMPLETED,
                           TimeEntry.duration_minutes > 0,
                           TimeEntry.synced_at.is_(None))
                   .order_by(TimeEntry.id)
                   .with_for_update()
                   .all())

        # (user_id, project_id, date) -> minutes
        pending: Dict[Tuple[int, int, date], int] = defaultdict(int)
        for entry in entries:
            pending[(entry.user_id, entry.project_id, entry.date)] += entry.duration_minutes

        synced = self._synced_minutes(pending)

        # (user_id, project_id, week_start) -> day name -> hours
        buckets: Dict[Tuple[int, int, date], Dict[str, Decimal]] = defaultdict(dict)
        for (user_id, project_id, day), minutes in pending.items():
            key = (user_id, project_id, week_start_for(day))
            buckets[key][weekday_name(day)] = added_hours(synced.get((user_id, project_id, day), 0), minutes)

        for (user_id, project_id, week_start), hours in buckets.items():
            self._merge_hours(user_id, project_id, week_start, hours)

        synced_at = utcnow()
        for entry in entries:
            entry.synced_at = synced_at

        return SyncResult(entries_synced=len(entries), timesheets_updated=len(buckets))

    def _synced_minutes(self, keys) -> Dict[Tuple[int, int, date], int]:
        """Minutes already folded into timesheets per (user_id, project_id, date) in ``keys``."""
        if not keys:
            return {}

        rows = (self.db.query(TimeEntry.user_id, TimeEntry.project_id, TimeEntry.date,
                              func.sum(TimeEntry.duration_minutes))
                .filter(TimeEntry.status == TimeEntryStatus.COMPLETED,
                        TimeEntry.synced_at.isnot(None),
                        TimeEntry.user_id.in_(sorted({user_id for user_id, _, _ in keys})),
                        TimeEntry.date.in_(sorted({day for _, _, day in keys})))
                .group_by(TimeEntry.user_id, TimeEntry.project_id, TimeEntry.date)
                .all())

        return {
            (user_id, project_id, day): int(minutes or 0)
            for user_id, project_id, day, minutes in rows
            if (user_id, project_id, day) in keys
        }


# Convenience functions
def save_timesheet(db: Session, user_id: int, project_id: int, week_start: date,
                   hours: Mapping[str, Decimal]) -> Timesheet:
    """Add hours to a weekly timesheet."""
    return TimesheetCRUD(db).save_timesheet(user_id, project_id, week_start, hours)


def get_user_timesheets(db: Session, user_id: int, week_start: date) -> List[Timesheet]:
    """Get a user's rows for one week."""
    return TimesheetCRUD(db).get_user_timesheets(user_id, week_start)


def get_all_timesheets(db: Session, user_id: Optional[int] = None,
                       week_start: Optional[date] = None,
                       project_id: Optional[int] = None) -> List[Timesheet]:
    """Get timesheet rows matching the supplied filters."""
    return TimesheetCRUD(db).get_all_timesheets(user_id, week_start, project_id)


def complete_project(db: Session, user_id: int, project_id: int) -> Decimal:
    """Close out a project for a user."""
    return TimesheetCRUD(db).complete_project(user_id, project_id)


def remove_project(db: Session, user_id: int, project_id: int) -> None:
    """Take a project off a user's timesheet."""
    TimesheetCRUD(db).remove_project(user_id, project_id)


def get_project_completions(db: Session) -> List[ProjectCompletion]:
    """Get every completion record."""
    return TimesheetCRUD(db).get_project_completions()


def sync_time_entries_to_timesheets(db: Session) -> SyncResult:
    """Fold finished clock sessions into timesheets."""
    return TimesheetCRUD(db).sync_time_entries_to_timesheets()
