from datetime import date, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from timesheets.fastapi.core.exceptions import Conflict, Forbidden, InvalidState, NotFound
from timesheets.fastapi.crud.time_entry import (
    clock_in,
    clock_out,
    get_active_entries,
    get_time_entry,
    get_user_time_entries,
)
from timesheets.fastapi.models.project import AssignmentStatus
from timesheets.fastapi.models.time_entry import TimeEntry, TimeEntryStatus

MONDAY_10AM = datetime(2024, 1, 8, 10, 0, 0)


@pytest.fixture
def assigned(user, project, assign):
    assign(user, project)
    return user, project


class TestClockIn:
    def test_creates_active_entry(self, db, assigned):
        user, project = assigned

        entry = clock_in(db, user.id, project.id, now=MONDAY_10AM)

        assert entry.id is not None
        assert entry.status == TimeEntryStatus.ACTIVE
        assert entry.clock_in == MONDAY_10AM
        assert entry.date == date(2024, 1, 8)
        assert entry.clock_out is None
        assert entry.duration_minutes is None
        assert entry.synced_at is None

    def test_second_clock_in_on_same_project_conflicts(self, db, assigned):
        user, project = assigned
        clock_in(db, user.id, project.id, now=MONDAY_10AM)

        with pytest.raises(Conflict, match="Already clocked in"):
            clock_in(db, user.id, project.id, now=MONDAY_10AM)

        assert len(get_active_entries(db, user.id)) == 1

    def test_open_sessions_on_different_projects_are_allowed(self, db, user, make_project, assign):
        first, second = make_project("Website"), make_project("Mobile App")
        assign(user, first)
        assign(user, second)

        clock_in(db, user.id, first.id, now=MONDAY_10AM)
        clock_in(db, user.id, second.id, now=MONDAY_10AM)

        assert len(get_active_entries(db, user.id)) == 2

    def test_can_clock_in_again_after_clocking_out(self, db, assigned):
        user, project = assigned
        entry = clock_in(db, user.id, project.id, now=MONDAY_10AM)
        clock_out(db, entry.id, user.id, now=datetime(2024, 1, 8, 11, 0, 0))

        again = clock_in(db, user.id, project.id, now=datetime(2024, 1, 8, 12, 0, 0))

        assert again.id != entry.id

    def test_requires_assignment(self, db, user, project):
        with pytest.raises(Forbidden):
            clock_in(db, user.id, project.id)

    @pytest.mark.parametrize("status", [AssignmentStatus.COMPLETED, AssignmentStatus.REMOVED])
    def test_requires_active_assignment(self, db, user, project, assign, status):
        assign(user, project, status=status)

        with pytest.raises(Forbidden):
            clock_in(db, user.id, project.id)

    def test_storage_rejects_two_open_sessions(self, db, assigned):
        user, project = assigned
        for _ in range(2):
            db.add(TimeEntry(
                user_id=user.id,
                project_id=project.id,
                clock_in=MONDAY_10AM,
                date=MONDAY_10AM.date(),
                status=TimeEntryStatus.ACTIVE
            ))

        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()


class TestClockOut:
    def test_records_whole_minutes(self, db, assigned):
        user, project = assigned
        entry = clock_in(db, user.id, project.id, now=MONDAY_10AM)

        closed = clock_out(db, entry.id, user.id, now=datetime(2024, 1, 8, 10, 29, 59))

        assert closed.duration_minutes == 29
        assert closed.status == TimeEntryStatus.COMPLETED
        assert closed.clock_out == datetime(2024, 1, 8, 10, 29, 59)

    def test_keeps_clock_in_date_across_midnight(self, db, assigned):
        user, project = assigned
        entry = clock_in(db, user.id, project.id, now=datetime(2024, 1, 8, 23, 0, 0))

        closed = clock_out(db, entry.id, user.id, now=datetime(2024, 1, 9, 1, 0, 0))

        assert closed.date == date(2024, 1, 8)
        assert closed.duration_minutes == 120

    def test_second_clock_out_is_invalid_state(self, db, assigned):
        user, project = assigned
        entry = clock_in(db, user.id, project.id, now=MONDAY_10AM)
        clock_out(db, entry.id, user.id, now=datetime(2024, 1, 8, 11, 0, 0))

        with pytest.raises(InvalidState, match="not active"):
            clock_out(db, entry.id, user.id)

    def test_other_users_entry_is_forbidden(self, db, assigned, make_user):
        user, project = assigned
        other = make_user("jane")
        entry = clock_in(db, user.id, project.id, now=MONDAY_10AM)

        with pytest.raises(Forbidden):
            clock_out(db, entry.id, other.id)

        assert get_time_entry(db, entry.id).status == TimeEntryStatus.ACTIVE

    def test_missing_entry(self, db, user):
        with pytest.raises(NotFound):
            clock_out(db, 999, user.id)


class TestListing:
    def test_active_entries_carry_project_names(self, db, assigned):
        user, project = assigned
        clock_in(db, user.id, project.id, now=MONDAY_10AM)

        [entry] = get_active_entries(db, user.id)

        assert entry.project_name == "Website Redesign"
        assert entry.client_name == "ABC Corp"

    def test_active_entries_exclude_closed_and_other_users(self, db, assigned, make_user, assign):
        user, project = assigned
        other = make_user("jane")
        assign(other, project)
        closed = clock_in(db, user.id, project.id, now=MONDAY_10AM)
        clock_out(db, closed.id, user.id, now=datetime(2024, 1, 8, 11, 0, 0))
        clock_in(db, other.id, project.id, now=MONDAY_10AM)

        assert get_active_entries(db, user.id) == []

    def test_time_entries_newest_first_with_date_filter(self, db, assigned):
        user, project = assigned
        first = clock_in(db, user.id, project.id, now=MONDAY_10AM)
        clock_out(db, first.id, user.id, now=datetime(2024, 1, 8, 11, 0, 0))
        second = clock_in(db, user.id, project.id, now=datetime(2024, 1, 9, 9, 0, 0))

        entries = get_user_time_entries(db, user.id)
        assert [e.id for e in entries] == [second.id, first.id]

        tuesday = get_user_time_entries(db, user.id, date(2024, 1, 9))
        assert [e.id for e in tuesday] == [second.id]

        assert get_user_time_entries(db, user.id, date(2024, 1, 10)) == []

    def test_get_time_entry_returns_none_when_absent(self, db):
        assert get_time_entry(db, 12345) is None
