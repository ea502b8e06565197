"""
Project Pydantic schemas for request/response validation.

This module defines the data validation schemas for projects and
user-project assignments.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from timesheets.fastapi.models.project import AssignmentStatus


class ProjectBase(BaseModel):
    """Base Project schema with common fields."""

    client_name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Client the project is for",
        examples=["ABC Corp"]
    )

    project_name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Name of the project",
        examples=["Website Redesign"]
    )

    work_type: str = Field(
        ...,
        min_length=2,
        max_length=50,
        description="Type of work",
        examples=["Development", "DevOps"]
    )

    location: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Where the work happens",
        examples=["Remote", "Office", "Hybrid"]
    )


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "client_name": "ABC Corp",
                "project_name": "Website Redesign",
                "work_type": "Development",
                "location": "Remote"
            }
        }
    )


class ProjectUpdate(ProjectBase):
    """Schema for updating a project; all fields are replaced."""

    model_config = ConfigDict(str_strip_whitespace=True)


class ProjectRead(ProjectBase):
    """Schema for reading project information."""

    id: int = Field(..., description="Unique identifier of the project")

    model_config = ConfigDict(from_attributes=True)


class AssignedProjectRead(ProjectRead):
    """Project as seen from a user's timesheet, with its assignment status."""

    status: AssignmentStatus = Field(..., description="Assignment status")
    assigned_at: Optional[datetime] = Field(None, description="When the project was assigned")


class ProjectAssign(BaseModel):
    """Schema for assigning a project to a user."""

    user_id: int = Field(..., gt=0, description="User to assign the project to")
    project_id: int = Field(..., gt=0, description="Project to assign")


class ProjectReference(BaseModel):
    """Request body naming a single project."""

    project_id: int = Field(..., gt=0, description="Project identifier")


class ProjectAssignResponse(BaseModel):
    """Response schema for an assignment request."""

    message: str = Field(..., description="Operation result message")
    created: bool = Field(..., description="False when the pair was already assigned")
    user_id: int
    project_id: int
    status: AssignmentStatus = Field(..., description="Current assignment status")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Operation result message")
