"""
Timesheet Pydantic schemas for request/response validation.

This module defines the weekly hours payload, the timesheet save request
and the read models for timesheets, completions and sync results.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from timesheets.fastapi.core.utils import WEEKDAYS
from timesheets.fastapi.models.timesheet import TimesheetStatus

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def parse_iso_date(value) -> date:
    """
    Parse a ``YYYY-MM-DD`` string into a date.

    Raises:
        ValueError: If the value is not a string in that form or does not
            name a real calendar date
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not re.match(ISO_DATE_PATTERN, value):
        raise ValueError("Date must be a string in YYYY-MM-DD format")
    return date.fromisoformat(value)


def _hours_field(day: str):
    return Field(None, ge=0, le=24, description=f"Hours worked on {day} (0-24)")


class TimesheetHours(BaseModel):
    """Partial map of day name to hours; unknown day names are rejected."""

    sunday: Optional[Decimal] = _hours_field("sunday")
    monday: Optional[Decimal] = _hours_field("monday")
    tuesday: Optional[Decimal] = _hours_field("tuesday")
    wednesday: Optional[Decimal] = _hours_field("wednesday")
    thursday: Optional[Decimal] = _hours_field("thursday")
    friday: Optional[Decimal] = _hours_field("friday")
    saturday: Optional[Decimal] = _hours_field("saturday")

    model_config = ConfigDict(extra="forbid")

    def supplied(self) -> Dict[str, Decimal]:
        """Only the days the caller actually sent."""
        return {
            day: value
            for day, value in self.model_dump(exclude_none=True).items()
            if day in WEEKDAYS
        }


class TimesheetSave(BaseModel):
    """Schema for saving (adding) hours to a weekly timesheet."""

    project_id: int = Field(..., gt=0, description="Project the hours are for")
    week_start: date = Field(
        ...,
        description="Any date in the target week (YYYY-MM-DD); normalised to its Sunday",
        examples=["2024-01-07"]
    )
    hours: TimesheetHours = Field(..., description="Hours per day to add")

    @field_validator("week_start", mode="before")
    @classmethod
    def week_start_is_iso_string(cls, v):
        return parse_iso_date(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "project_id": 1,
                "week_start": "2024-01-07",
                "hours": {"monday": 8, "tuesday": 7.5}
            }
        }
    )


class TimesheetRead(BaseModel):
    """Schema for reading a weekly timesheet row."""

    id: int = Field(..., description="Timesheet unique identifier")
    user_id: int = Field(..., description="Owner")
    project_id: int = Field(..., description="Project")
    week_start: date = Field(..., description="Sunday that begins the week")
    sunday: Decimal
    monday: Decimal
    tuesday: Decimal
    wednesday: Decimal
    thursday: Decimal
    friday: Decimal
    saturday: Decimal
    total_hours: Decimal = Field(..., description="Sum of the seven days")
    status: TimesheetStatus = Field(..., description="active or completed")
    submitted_at: datetime = Field(..., description="Last submission timestamp")
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    work_type: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AdminTimesheetRead(TimesheetRead):
    """Timesheet row with the owner's display name, for admin reports."""

    user_name: Optional[str] = None


class TimesheetSaveResponse(BaseModel):
    """Response schema for a timesheet save."""

    message: str = Field(..., description="Operation result message")
    id: int = Field(..., description="Saved timesheet identifier")
    timesheet: TimesheetRead = Field(..., description="Row after the merge")


class ProjectCompletionRead(BaseModel):
    """Schema for reading a project completion audit record."""

    id: int
    user_id: int
    project_id: int
    completion_date: datetime
    total_hours_worked: Decimal
    user_name: Optional[str] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    work_type: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CompleteProjectResponse(BaseModel):
    """Response schema for completing a project."""

    message: str = Field(..., description="Operation result message")
    total_hours: Decimal = Field(..., description="Hours snapshotted in the completion record")


class SyncResult(BaseModel):
    """Outcome of folding completed time entries into timesheets."""

    entries_synced: int = Field(0, description="Time entries consumed")
    timesheets_updated: int = Field(0, description="Timesheet rows created or merged into")


class SyncResponse(SyncResult):
    """Response schema for the admin sync operation."""

    message: str = Field(..., description="Operation result message")
