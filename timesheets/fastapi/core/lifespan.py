import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy.orm import Session

from timesheets.fastapi.core.exceptions import TimesheetError
from timesheets.fastapi.core.init_settings import global_settings
from timesheets.fastapi.core.logger import setup_logging
from timesheets.fastapi.crud.user import create_user, get_user_count
from timesheets.fastapi.dependencies.database import init_db, SessionLocal
from timesheets.fastapi.models.user import UserRole
from timesheets.fastapi.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def ensure_initial_admin(db: Session) -> None:
    """Create the configured admin account when no admin exists yet."""
    admin_count = get_user_count(db, UserRole.ADMIN)
    if admin_count:
        logger.info("Found %d existing admin(s)", admin_count)
        return

    admin = create_user(db, UserCreate(
        username=global_settings.INITIAL_ADMIN_USERNAME,
        name=global_settings.INITIAL_ADMIN_NAME,
        role=UserRole.ADMIN,
        password=global_settings.INITIAL_ADMIN_PASSWORD
    ))
    logger.warning(
        "Created initial admin user '%s' with the configured default password; change it after first login",
        admin.username
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Initialize the database schema
    init_db()

    db = SessionLocal()
    try:
        ensure_initial_admin(db)
    except TimesheetError as e:
        logger.error("Error creating initial admin: %s", e.detail)
    finally:
        db.close()

    yield
