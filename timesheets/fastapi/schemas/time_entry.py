"""
Pydantic schemas for TimeEntry model validation and serialization.

This module defines the data validation schemas for clock-in/out
requests and time entry responses.
"""

from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from timesheets.fastapi.models.time_entry import TimeEntryStatus


class ClockInRequest(BaseModel):
    """Schema for clock-in requests."""

    project_id: int = Field(
        ...,
        gt=0,
        description="Project to clock in to",
        examples=[1]
    )


class ClockOutRequest(BaseModel):
    """Schema for clock-out requests."""

    entry_id: int = Field(
        ...,
        gt=0,
        description="Active time entry to close",
        examples=[42]
    )


class TimeEntryRead(BaseModel):
    """Schema for reading time entry information."""

    id: int = Field(..., description="Time entry unique identifier")
    user_id: int = Field(..., description="User who owns this entry")
    project_id: int = Field(..., description="Project time was logged against")
    project_name: Optional[str] = Field(None, description="Project display name")
    client_name: Optional[str] = Field(None, description="Client display name")
    clock_in: datetime = Field(..., description="Session start (UTC)")
    clock_out: Optional[datetime] = Field(None, description="Session end (UTC)")
    duration_minutes: Optional[int] = Field(None, description="Whole minutes worked")
    date: date_type = Field(..., description="Calendar date of clock-in")
    status: TimeEntryStatus = Field(..., description="active or completed")
    synced_at: Optional[datetime] = Field(None, description="When folded into a timesheet")
    created_at: datetime = Field(..., description="Record creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class ClockActionResponse(BaseModel):
    """Response schema for clock-in/out operations."""

    message: str = Field(..., description="Operation result message")
    entry: TimeEntryRead = Field(..., description="Created or closed time entry")
