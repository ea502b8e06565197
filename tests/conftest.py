"""
Shared fixtures: an in-memory SQLite database per test, a session on it,
and a TestClient whose requests use the same database.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import timesheets.fastapi.models  # noqa: F401
from timesheets.fastapi.dependencies.database import Base, build_engine, get_sync_db
from timesheets.fastapi.main import app
from timesheets.fastapi.models.project import Project, UserProject, AssignmentStatus
from timesheets.fastapi.models.user import User, UserRole
from timesheets.security.auth import create_user_token
from timesheets.security.password import hash_password

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_sync_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_sync_db] = override_get_sync_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username="john", role=UserRole.USER, name=None):
        user = User(
            username=username,
            name=name or username.title(),
            role=role,
            password_hash=PASSWORD_HASH
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_project(db):
    def _make_project(project_name="Website Redesign", client_name="ABC Corp"):
        project = Project(
            client_name=client_name,
            project_name=project_name,
            work_type="Development",
            location="Remote"
        )
        db.add(project)
        db.commit()
        db.refresh(project)
        return project
    return _make_project


@pytest.fixture
def assign(db):
    def _assign(user, project, status=AssignmentStatus.ACTIVE):
        assignment = UserProject(user_id=user.id, project_id=project.id, status=status)
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment
    return _assign


@pytest.fixture
def user(make_user):
    return make_user("john")


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=UserRole.ADMIN, name="Administrator")


@pytest.fixture
def project(make_project):
    return make_project()


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_user_token(user.id, user.username, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
