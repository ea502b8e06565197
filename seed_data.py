"""
Load demo accounts and projects into an empty database.

Creates two regular users and three projects, and assigns every project
to both users. Safe to run twice: existing usernames and projects are
left alone.
"""

import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from timesheets.fastapi.crud.project import assign_project, create_project, get_projects
from timesheets.fastapi.crud.user import create_user, get_user_by_username
from timesheets.fastapi.dependencies.database import SessionLocal, init_db
from timesheets.fastapi.models.user import UserRole
from timesheets.fastapi.schemas.project import ProjectCreate
from timesheets.fastapi.schemas.user import UserCreate

DEMO_USERS = [
    {"username": "john", "name": "John Smith", "password": "user123"},
    {"username": "jane", "name": "Jane Doe", "password": "user123"},
]

DEMO_PROJECTS = [
    {"client_name": "ABC Corp", "project_name": "Website Redesign", "work_type": "Development", "location": "Remote"},
    {"client_name": "XYZ Ltd", "project_name": "Mobile App", "work_type": "Development", "location": "Office"},
    {"client_name": "TechStart", "project_name": "Database Migration", "work_type": "DevOps", "location": "Hybrid"},
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        users = []
        for raw in DEMO_USERS:
            user = get_user_by_username(db, raw["username"])
            if not user:
                user = create_user(db, UserCreate(role=UserRole.USER, **raw))
                print(f"✓ Created user {user.username}")
            users.append(user)

        existing = {(p.client_name, p.project_name): p for p in get_projects(db)}
        projects = []
        for raw in DEMO_PROJECTS:
            project = existing.get((raw["client_name"], raw["project_name"]))
            if not project:
                project = create_project(db, ProjectCreate(**raw))
                print(f"✓ Created project {project}")
            projects.append(project)

        for user in users:
            for project in projects:
                assign_project(db, user.id, project.id)

        print(f"\n✅ Seeded {len(users)} users and {len(projects)} projects")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
