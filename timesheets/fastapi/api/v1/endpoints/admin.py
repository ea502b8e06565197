"""
Admin management endpoints.

This module provides FastAPI endpoints for administrators: managing users
and projects, assigning projects, timesheet and completion reports, and
the time-entry sync.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from timesheets.fastapi.crud.project import (
    create_project, get_projects, update_project, delete_project, assign_project
)
from timesheets.fastapi.crud.timesheet import (
    get_all_timesheets, get_project_completions, sync_time_entries_to_timesheets
)
from timesheets.fastapi.crud.user import create_user, get_users
from timesheets.fastapi.dependencies.database import get_sync_db
from timesheets.fastapi.dependencies.query import parse_date_query
from timesheets.fastapi.models.user import User, UserRole
from timesheets.fastapi.schemas.project import (
    ProjectCreate, ProjectUpdate, ProjectRead, ProjectAssign, ProjectAssignResponse, MessageResponse
)
from timesheets.fastapi.schemas.timesheet import (
    ISO_DATE_PATTERN, AdminTimesheetRead, ProjectCompletionRead, SyncResponse
)
from timesheets.fastapi.schemas.user import UserCreate, UserRead, UserCreateResponse
from timesheets.security.dependencies import RequireAdmin


router = APIRouter(tags=["admin"])


@router.get("/users", response_model=List[UserRead], summary="List Users")
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Get all user accounts, optionally of one role.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **401**: Not authenticated
    - **403**: Not an admin
    """
    return get_users(db, role)


@router.post("/users", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED,
             summary="Create User")
async def create_user_account(
    user_create: UserCreate,
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Create a user or admin account.

    **Permissions:** Requires admin authentication

    **Process:**
    1. Normalize the username (accents and spaces removed, lowercased)
    2. Check it is not taken
    3. Hash the password and store the account

    **Errors:**
    - **401**: Not authenticated
    - **403**: Not an admin
    - **409**: Username already registered
    - **422**: Invalid username, name or password
    """
    user = create_user(db, user_create)

    return UserCreateResponse(
        message="User created successfully",
        user=UserRead.model_validate(user)
    )


@router.get("/projects", response_model=List[ProjectRead], summary="List Projects")
async def list_projects(
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Get every project.

    **Permissions:** Requires admin authentication
    """
    return get_projects(db)


@router.post("/projects", response_model=ProjectRead, status_code=status.HTTP_201_CREATED,
             summary="Create Project")
async def create_new_project(
    project_create: ProjectCreate,
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Create a project.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **401**: Not authenticated
    - **403**: Not an admin
    - **422**: Missing or invalid fields
    """
    return create_project(db, project_create)


@router.put("/projects/{project_id}", response_model=ProjectRead, summary="Update Project")
async def update_existing_project(
    project_update: ProjectUpdate,
    project_id: int = Path(..., gt=0, description="Project to update"),
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Replace a project's client, name, work type and location.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **404**: Project not found
    - **422**: Missing or invalid fields
    """
    return update_project(db, project_id, project_update)


@router.delete("/projects/{project_id}", response_model=MessageResponse, summary="Delete Project")
async def delete_existing_project(
    project_id: int = Path(..., gt=0, description="Project to delete"),
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Delete a project together with its timesheets, time entries,
    assignments and completion records.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **404**: Project not found
    """
    delete_project(db, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post("/assign-project", response_model=ProjectAssignResponse, summary="Assign Project")
async def assign_project_to_user(
    assign_data: ProjectAssign,
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Put a project on a user's timesheet.

    Assigning a pair that is already assigned changes nothing, even when
    the existing assignment was completed or removed.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **404**: User or project not found
    - **422**: Ids are not positive integers
    """
    assignment, created = assign_project(db, assign_data.user_id, assign_data.project_id)

    return ProjectAssignResponse(
        message="Project assigned successfully" if created else "Project already assigned",
        created=created,
        user_id=assignment.user_id,
        project_id=assignment.project_id,
        status=assignment.status
    )


@router.get("/timesheets", response_model=List[AdminTimesheetRead], summary="All Timesheets")
async def list_all_timesheets(
    user_id: Optional[int] = Query(None, gt=0, description="Only this user's rows"),
    week_start: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN, description="Only this week (YYYY-MM-DD)"),
    project_id: Optional[int] = Query(None, gt=0, description="Only this project's rows"),
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Get timesheet rows across all users.

    Supplied filters are combined; with none, every row is returned.

    **Permissions:** Requires admin authentication

    **Errors:**
    - **422**: Invalid id or date filter
    """
    return get_all_timesheets(
        db,
        user_id=user_id,
        week_start=parse_date_query(week_start, "week_start"),
        project_id=project_id
    )


@router.get("/project-completions", response_model=List[ProjectCompletionRead], summary="Project Completions")
async def list_project_completions(
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Get the project completion audit trail, newest first.

    **Permissions:** Requires admin authentication
    """
    return get_project_completions(db)


@router.post("/sync-time-entries", response_model=SyncResponse, summary="Sync Time Entries")
async def sync_time_entries(
    db: Session = Depends(get_sync_db),
    current_admin: User = RequireAdmin
):
    """
    Fold finished clock sessions into weekly timesheets.

    Only sessions not synced before are counted, so running it again
    right away changes nothing.

    **Permissions:** Requires admin authentication

    **Returns:**
    - Number of time entries consumed
    - Number of timesheet rows created or updated
    """
    result = sync_time_entries_to_timesheets(db)

    return SyncResponse(
        message="Time entries synced to timesheets",
        entries_synced=result.entries_synced,
        timesheets_updated=result.timesheets_updated
    )
