"""
Project and assignment CRUD operations.

This module provides Create, Read, Update, Delete operations for projects
and the user-project assignments that put a project on a user's timesheet.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from timesheets.fastapi.core.exceptions import NotFound
from timesheets.fastapi.dependencies.database import unit_of_work
from timesheets.fastapi.models.project import Project, UserProject, AssignmentStatus
from timesheets.fastapi.models.time_entry import TimeEntry
from timesheets.fastapi.models.timesheet import Timesheet, ProjectCompletion
from timesheets.fastapi.models.user import User
from timesheets.fastapi.schemas.project import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


def create_project(db: Session, project_data: ProjectCreate) -> Project:
    """
    Create a new project.

    Args:
        db: Database session
        project_data: Project creation data

    Returns:
        Created project instance
    """
    db_project = Project(**project_data.model_dump())

    with unit_of_work(db, "create project"):
        db.add(db_project)
    db.refresh(db_project)

    logger.info("Created project %s (id=%s)", db_project, db_project.id)
    return db_project


def get_project(db: Session, project_id: int) -> Optional[Project]:
    """
    Get a project by ID.

    Returns:
        Project instance if found, None otherwise
    """
    return db.query(Project).filter(Project.id == project_id).first()


def get_projects(db: Session) -> List[Project]:
    """Get every project, ordered by id."""
    return db.query(Project).order_by(Project.id).all()


def update_project(db: Session, project_id: int, project_update: ProjectUpdate) -> Project:
    """
    Replace a project's descriptive fields.

    Raises:
        NotFound: If the project does not exist
    """
    db_project = get_project(db, project_id)
    if not db_project:
        raise NotFound("Project not found")

    with unit_of_work(db, "update project"):
        for field, value in project_update.model_dump().items():
            setattr(db_project, field, value)
    db.refresh(db_project)

    return db_project


def delete_project(db: Session, project_id: int) -> None:
    """
    Delete a project and every row that references it.

    Dependents go first so no foreign key is left dangling: timesheets,
    time entries, assignments and completion records, then the project.
    All of it happens in one transaction.

    Raises:
        NotFound: If the project does not exist
    """
    db_project = get_project(db, project_id)
    if not db_project:
        raise NotFound("Project not found")

    with unit_of_work(db, "delete project"):
        timesheets = (db.query(Timesheet)
                      .filter(Timesheet.project_id == project_id)
                      .delete())
        entries = (db.query(TimeEntry)
                   .filter(TimeEntry.project_id == project_id)
                   .delete())
        assignments = (db.query(UserProject)
                       .filter(UserProject.project_id == project_id)
                       .delete())
        completions = (db.query(ProjectCompletion)
                       .filter(ProjectCompletion.project_id == project_id)
                       .delete())
        db.query(Project).filter(Project.id == project_id).delete()

    logger.info(
        "Deleted project %s with %d timesheets, %d time entries, %d assignments, %d completions",
        project_id, timesheets, entries, assignments, completions
    )


def get_assignment(db: Session, user_id: int, project_id: int) -> Optional[UserProject]:
    """Get the assignment for a (user, project) pair, whatever its status."""
    return db.query(UserProject).filter(
        UserProject.user_id == user_id,
        UserProject.project_id == project_id
    ).first()


def get_active_assignment(db: Session, user_id: int, project_id: int) -> Optional[UserProject]:
    """Get the assignment for a pair only while it is active."""
    return db.query(UserProject).filter(
        UserProject.user_id == user_id,
        UserProject.project_id == project_id,
        UserProject.status == AssignmentStatus.ACTIVE
    ).first()


def assign_project(db: Session, user_id: int, project_id: int) -> Tuple[UserProject, bool]:
    """
    Assign a project to a user.

    Assigning an already-assigned pair is a no-op whatever the existing
    assignment's status; completed or removed assignments are not revived.

    Returns:
        (assignment, created) where created is False for the no-op case

    Raises:
        NotFound: If the user or project does not exist
    """
    if not db.query(User).filter(User.id == user_id).first():
        raise NotFound("User not found")
    if not get_project(db, project_id):
        raise NotFound("Project not found")

    existing = get_assignment(db, user_id, project_id)
    if existing:
        return existing, False

    assignment = UserProject(user_id=user_id, project_id=project_id, status=AssignmentStatus.ACTIVE)
    try:
        with unit_of_work(db, "assign project"):
            db.add(assignment)
    except IntegrityError:
        # A concurrent request inserted the same pair first
        return get_assignment(db, user_id, project_id), False
    db.refresh(assignment)

    logger.info("Assigned project %s to user %s", project_id, user_id)
    return assignment, True


def get_user_projects(db: Session, user_id: int) -> List[dict]:
    """
    Get the projects currently on a user's timesheet (active assignments).

    Returns:
        List of dictionaries with project fields plus assignment status
    """
    rows = (
        db.query(Project, UserProject)
        .join(UserProject, UserProject.project_id == Project.id)
        .filter(
            UserProject.user_id == user_id,
            UserProject.status == AssignmentStatus.ACTIVE
        )
        .order_by(Project.id)
        .all()
    )

    return [
        {
            "id": project.id,
            "client_name": project.client_name,
            "project_name": project.project_name,
            "work_type": project.work_type,
            "location": project.location,
            "status": assignment.status,
            "assigned_at": assignment.assigned_at
        }
        for project, assignment in rows
    ]
