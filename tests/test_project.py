from datetime import date, datetime
from decimal import Decimal

import pytest

from timesheets.fastapi.core.exceptions import Conflict, NotFound
from timesheets.fastapi.crud.project import (
    assign_project,
    create_project,
    delete_project,
    get_assignment,
    get_project,
    get_projects,
    get_user_projects,
    update_project,
)
from timesheets.fastapi.crud.time_entry import clock_in
from timesheets.fastapi.crud.timesheet import complete_project, save_timesheet
from timesheets.fastapi.crud.user import create_user, get_user_by_username, get_user_count, get_users
from timesheets.fastapi.models.project import AssignmentStatus, UserProject
from timesheets.fastapi.models.time_entry import TimeEntry
from timesheets.fastapi.models.timesheet import ProjectCompletion, Timesheet
from timesheets.fastapi.models.user import UserRole
from timesheets.fastapi.schemas.project import ProjectCreate, ProjectUpdate
from timesheets.fastapi.schemas.user import UserCreate
from timesheets.security.password import verify_password

WEEK = date(2024, 1, 7)


class TestUsers:
    def test_create_user_normalizes_and_hashes(self, db):
        user = create_user(db, UserCreate(username="John Doe", name="John Doe", password="user123"))

        assert user.username == "johndoe"
        assert user.role == UserRole.USER
        assert user.password_hash != "user123"
        assert verify_password("user123", user.password_hash)

    def test_duplicate_username_conflicts(self, db, user):
        with pytest.raises(Conflict):
            create_user(db, UserCreate(username="JOHN", name="Another John", password="user123"))

    def test_lookup_by_username_normalizes(self, db, user):
        assert get_user_by_username(db, "John").id == user.id
        assert get_user_by_username(db, "nobody") is None

    def test_list_and_count_by_role(self, db, user, admin):
        assert [u.username for u in get_users(db)] == ["john", "admin"]
        assert [u.username for u in get_users(db, UserRole.ADMIN)] == ["admin"]
        assert get_user_count(db, UserRole.USER) == 1


class TestProjects:
    def test_create_get_update(self, db):
        project = create_project(db, ProjectCreate(
            client_name="ABC Corp", project_name="Website", work_type="Development", location="Remote"
        ))

        updated = update_project(db, project.id, ProjectUpdate(
            client_name="ABC Corp", project_name="Website v2", work_type="Design", location="Office"
        ))

        assert updated.id == project.id
        assert get_project(db, project.id).project_name == "Website v2"
        assert [p.id for p in get_projects(db)] == [project.id]

    def test_absent_project_reads_as_none(self, db):
        assert get_project(db, 42) is None
        assert get_projects(db) == []

    def test_update_missing_project(self, db):
        with pytest.raises(NotFound):
            update_project(db, 42, ProjectUpdate(
                client_name="ABC Corp", project_name="Website", work_type="Development", location="Remote"
            ))

    def test_delete_missing_project(self, db):
        with pytest.raises(NotFound):
            delete_project(db, 42)


class TestAssignments:
    def test_assign_is_idempotent(self, db, user, project):
        first, created = assign_project(db, user.id, project.id)
        second, created_again = assign_project(db, user.id, project.id)

        assert created is True
        assert created_again is False
        assert first.id == second.id
        assert db.query(UserProject).count() == 1

    def test_completed_assignment_is_not_revived(self, db, user, project, assign):
        assign(user, project, status=AssignmentStatus.COMPLETED)

        assignment, created = assign_project(db, user.id, project.id)

        assert created is False
        assert assignment.status == AssignmentStatus.COMPLETED

    def test_unknown_user_or_project(self, db, user, project):
        with pytest.raises(NotFound, match="User"):
            assign_project(db, 999, project.id)
        with pytest.raises(NotFound, match="Project"):
            assign_project(db, user.id, 999)

    def test_user_projects_lists_only_active(self, db, user, make_project, assign):
        active, done, gone = make_project("Active"), make_project("Done"), make_project("Gone")
        assign(user, active)
        assign(user, done, status=AssignmentStatus.COMPLETED)
        assign(user, gone, status=AssignmentStatus.REMOVED)

        projects = get_user_projects(db, user.id)

        assert [p["project_name"] for p in projects] == ["Active"]
        assert projects[0]["status"] == AssignmentStatus.ACTIVE

    def test_get_assignment_any_status(self, db, user, project, assign):
        assign(user, project, status=AssignmentStatus.REMOVED)

        assert get_assignment(db, user.id, project.id).status == AssignmentStatus.REMOVED
        assert get_assignment(db, user.id, 999) is None


class TestDeleteCascade:
    def test_removes_every_dependent_row(self, db, user, make_project, assign):
        doomed, kept = make_project("Doomed"), make_project("Kept")
        for proj in (doomed, kept):
            assign(user, proj)
            save_timesheet(db, user.id, proj.id, WEEK, {"monday": Decimal("2")})
            clock_in(db, user.id, proj.id, now=datetime(2024, 1, 8, 9, 0))
        complete_project(db, user.id, doomed.id)

        delete_project(db, doomed.id)

        assert get_project(db, doomed.id) is None
        for model in (Timesheet, TimeEntry, UserProject, ProjectCompletion):
            assert db.query(model).filter(model.project_id == doomed.id).count() == 0
        assert db.query(Timesheet).filter(Timesheet.project_id == kept.id).count() == 1
        assert db.query(TimeEntry).filter(TimeEntry.project_id == kept.id).count() == 1
        assert get_assignment(db, user.id, kept.id) is not None
