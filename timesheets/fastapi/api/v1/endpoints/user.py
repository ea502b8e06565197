"""
User timesheet endpoints.

This module provides FastAPI endpoints for the caller's own timesheet:
assigned projects, weekly hours, and completing or removing a project.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from timesheets.fastapi.core.utils import utcnow
from timesheets.fastapi.crud.project import get_user_projects
from timesheets.fastapi.crud.timesheet import (
    save_timesheet, get_user_timesheets, complete_project, remove_project
)
from timesheets.fastapi.dependencies.database import get_sync_db
from timesheets.fastapi.dependencies.query import parse_date_query
from timesheets.fastapi.models.user import User
from timesheets.fastapi.schemas.project import AssignedProjectRead, ProjectReference, MessageResponse
from timesheets.fastapi.schemas.timesheet import (
    ISO_DATE_PATTERN, TimesheetSave, TimesheetRead, TimesheetSaveResponse, CompleteProjectResponse
)
from timesheets.security.dependencies import RequireUser


router = APIRouter(tags=["timesheets"])


@router.get("/projects", response_model=List[AssignedProjectRead], summary="My Projects")
async def list_my_projects(
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Get the projects currently on the caller's timesheet.

    Only active assignments are listed; completed and removed projects
    drop off.

    **Permissions:** Requires authentication

    **Errors:**
    - **401**: Not authenticated
    """
    return get_user_projects(db, current_user.id)


@router.get("/timesheets", response_model=List[TimesheetRead], summary="My Timesheets")
async def list_my_timesheets(
    week_start: Optional[str] = Query(
        None,
        pattern=ISO_DATE_PATTERN,
        description="Any date of the week (YYYY-MM-DD); defaults to the current week"
    ),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Get the caller's timesheet rows for one week, across projects.

    **Permissions:** Requires authentication

    **Errors:**
    - **401**: Not authenticated
    - **422**: week_start is not a valid YYYY-MM-DD date
    """
    week = parse_date_query(week_start, "week_start") or utcnow().date()
    return get_user_timesheets(db, current_user.id, week)


@router.post("/timesheets", response_model=TimesheetSaveResponse, summary="Save Timesheet")
async def save_my_timesheet(
    timesheet_data: TimesheetSave,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Add hours to the caller's weekly timesheet for a project.

    **Permissions:** Requires authentication and an active assignment

    **Process:**
    1. Normalise week_start to the Sunday of its week
    2. Add each supplied day's hours to the stored value (or create the row)
    3. Recompute the weekly total

    **Parameters:**
    - **project_id**: Project the hours are for
    - **week_start**: Any date in the week (YYYY-MM-DD)
    - **hours**: Any subset of sunday..saturday, each 0-24

    **Errors:**
    - **401**: Not authenticated
    - **403**: Project not assigned to the caller
    - **422**: Invalid project id, date or hours
    """
    timesheet = save_timesheet(
        db,
        current_user.id,
        timesheet_data.project_id,
        timesheet_data.week_start,
        timesheet_data.hours.supplied()
    )

    return TimesheetSaveResponse(
        message="Timesheet saved successfully",
        id=timesheet.id,
        timesheet=TimesheetRead.model_validate(timesheet)
    )


@router.post("/complete-project", response_model=CompleteProjectResponse, summary="Complete Project")
async def complete_my_project(
    project_data: ProjectReference,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Close out a project: record the active hours and archive its timesheets.

    Calling it twice records a second completion of 0 hours.

    **Permissions:** Requires authentication

    **Errors:**
    - **401**: Not authenticated
    - **404**: Project was never assigned to the caller
    """
    total = complete_project(db, current_user.id, project_data.project_id)

    return CompleteProjectResponse(
        message="Project completed successfully",
        total_hours=total
    )


@router.delete("/remove-project/{project_id}", response_model=MessageResponse, summary="Remove Project")
async def remove_my_project(
    project_id: int = Path(..., gt=0, description="Project to remove"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Take a project off the caller's timesheet. Saved hours are kept.

    **Permissions:** Requires authentication

    **Errors:**
    - **401**: Not authenticated
    - **404**: Project was never assigned to the caller
    - **422**: project_id is not a positive integer
    """
    remove_project(db, current_user.id, project_id)
    return MessageResponse(message="Project removed from timesheet")
