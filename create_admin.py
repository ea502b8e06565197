"""
Create an admin account from the command line.

Usage: python create_admin.py <username> <password> [display name]
"""

import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pydantic import ValidationError

from timesheets.fastapi.core.exceptions import TimesheetError
from timesheets.fastapi.crud.user import create_user
from timesheets.fastapi.dependencies.database import SessionLocal, init_db
from timesheets.fastapi.models.user import UserRole
from timesheets.fastapi.schemas.user import UserCreate


def create_admin_account(username: str, password: str, name: str = "Administrator"):
    """Create an admin user, creating the tables first if needed."""
    init_db()

    try:
        admin_data = UserCreate(username=username, name=name, role=UserRole.ADMIN, password=password)
    except ValidationError as e:
        print(f"❌ Invalid admin details: {e}")
        return None

    db = SessionLocal()
    try:
        admin = create_user(db, admin_data)
        print("✅ Successfully created admin user:")
        print(f"   ID: {admin.id}")
        print(f"   Username: {admin.username}")
        print(f"   Created: {admin.created_at}")

        print("\n🚀 Log in at:")
        print("   POST http://localhost:8000/api/v1/auth/login")
        print("   Docs: http://localhost:8000/docs")

        return admin

    except TimesheetError as e:
        print(f"❌ Error creating admin user: {e.detail}")
        return None

    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python create_admin.py <username> <password> [display name]")
        sys.exit(1)

    admin = create_admin_account(*sys.argv[1:])
    sys.exit(0 if admin else 1)
