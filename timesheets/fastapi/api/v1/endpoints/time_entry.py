"""
Time entry endpoints for clock-in/out functionality.

This module provides FastAPI endpoints for opening and closing clock
sessions and listing the caller's sessions.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timesheets.fastapi.crud.time_entry import (
    clock_in, clock_out, get_active_entries, get_user_time_entries
)
from timesheets.fastapi.dependencies.database import get_sync_db
from timesheets.fastapi.dependencies.query import parse_date_query
from timesheets.fastapi.models.user import User
from timesheets.fastapi.schemas.time_entry import (
    ClockInRequest, ClockOutRequest, ClockActionResponse, TimeEntryRead
)
from timesheets.fastapi.schemas.timesheet import ISO_DATE_PATTERN
from timesheets.security.dependencies import RequireUser


router = APIRouter(tags=["time-tracking"])


@router.post("/clock-in", response_model=ClockActionResponse, summary="Clock In")
async def clock_in_to_project(
    clock_data: ClockInRequest,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Start a clock session on an assigned project.

    **Permissions:** Requires authentication and an active assignment

    **Returns:**
    - Success message
    - Created time entry (status active)

    **Errors:**
    - **401**: Not authenticated
    - **403**: Project not assigned to the caller
    - **409**: Already clocked in to this project
    - **422**: project_id is not a positive integer
    """
    entry = clock_in(db, current_user.id, clock_data.project_id)

    return ClockActionResponse(
        message="Clocked in successfully",
        entry=TimeEntryRead.model_validate(entry)
    )


@router.post("/clock-out", response_model=ClockActionResponse, summary="Clock Out")
async def clock_out_of_entry(
    clock_data: ClockOutRequest,
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Close one of the caller's open clock sessions.

    The duration is recorded in whole minutes; a partial minute is dropped.

    **Permissions:** Requires authentication; the entry must be the caller's

    **Errors:**
    - **401**: Not authenticated
    - **403**: Entry belongs to another user
    - **404**: Entry not found
    - **409**: Entry is not active
    - **422**: entry_id is not a positive integer
    """
    entry = clock_out(db, clock_data.entry_id, current_user.id)

    return ClockActionResponse(
        message="Clocked out successfully",
        entry=TimeEntryRead.model_validate(entry)
    )


@router.get("/active-entries", response_model=List[TimeEntryRead], summary="Active Entries")
async def list_active_entries(
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Get the caller's open clock sessions across all projects, newest first.

    **Permissions:** Requires authentication

    **Errors:**
    - **401**: Not authenticated
    """
    return get_active_entries(db, current_user.id)


@router.get("/time-entries", response_model=List[TimeEntryRead], summary="Time Entries")
async def list_time_entries(
    date: Optional[str] = Query(
        None,
        pattern=ISO_DATE_PATTERN,
        description="Only entries clocked in on this date (YYYY-MM-DD)"
    ),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """
    Get all of the caller's clock sessions, newest first.

    **Permissions:** Requires authentication

    **Parameters:**
    - **date**: Exact clock-in date to filter on (optional)

    **Errors:**
    - **401**: Not authenticated
    - **422**: date is not a valid YYYY-MM-DD date
    """
    return get_user_time_entries(db, current_user.id, parse_date_query(date, "date"))
