"""
Migration: Track which time entries have been synced into timesheets

Adds a nullable synced_at timestamp to time_entries so the admin sync only
folds in sessions it has not counted yet, plus the partial unique index
that allows a single open session per user and project.

Existing completed entries are left unsynced unless --mark-existing is
given; use it when earlier syncs already counted them.
"""

import sys
import os

# Add the project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy import text, inspect

from timesheets.fastapi.core.utils import utcnow
from timesheets.fastapi.dependencies.database import engine


def run_migration(mark_existing=False):
    """Add synced_at and the active-session index to time_entries."""
    print(f"Starting synced_at migration at {utcnow()}")

    with engine.connect() as connection:
        inspector = inspect(connection)
        columns = {col['name'] for col in inspector.get_columns('time_entries')}

        if 'synced_at' not in columns:
            print("Adding synced_at column to time_entries table...")
            connection.execute(text("""
                ALTER TABLE time_entries
                ADD COLUMN synced_at TIMESTAMP DEFAULT NULL
            """))
            connection.commit()
            print("✓ Added synced_at column")
        else:
            print("⊘ synced_at column already exists in time_entries table")

        if mark_existing:
            result = connection.execute(text("""
                UPDATE time_entries
                SET synced_at = :now
                WHERE status = 'completed' AND synced_at IS NULL
            """), {"now": utcnow()})
            connection.commit()
            print(f"✓ Marked {result.rowcount} existing completed entries as synced")

        indexes = {index['name'] for index in inspector.get_indexes('time_entries')}
        if 'uq_time_entries_active_session' not in indexes:
            print("Creating unique index on open sessions...")
            connection.execute(text("""
                CREATE UNIQUE INDEX uq_time_entries_active_session
                ON time_entries (user_id, project_id)
                WHERE status = 'active'
            """))
            connection.commit()
            print("✓ Created uq_time_entries_active_session")
        else:
            print("⊘ uq_time_entries_active_session already exists")

    print("\n" + "="*50)
    print("Migration completed successfully!")
    print("="*50)


def rollback_migration():
    """Drop the active-session index and the synced_at column."""
    print(f"Starting rollback at {utcnow()}")

    with engine.connect() as connection:
        inspector = inspect(connection)

        connection.execute(text("DROP INDEX IF EXISTS uq_time_entries_active_session"))
        connection.commit()
        print("✓ Dropped uq_time_entries_active_session")

        columns = {col['name'] for col in inspector.get_columns('time_entries')}
        if 'synced_at' in columns:
            connection.execute(text("ALTER TABLE time_entries DROP COLUMN synced_at"))
            connection.commit()
            print("✓ Removed synced_at column from time_entries table")
        else:
            print("⊘ synced_at column doesn't exist in time_entries table")

    print("\n" + "="*50)
    print("Rollback completed successfully!")
    print("="*50)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Add time entry sync tracking")
    parser.add_argument(
        "--rollback",
        action="store_true",
        help="Rollback the migration (remove synced_at and the index)"
    )
    parser.add_argument(
        "--mark-existing",
        action="store_true",
        help="Mark completed entries as already synced"
    )

    args = parser.parse_args()

    try:
        if args.rollback:
            rollback_migration()
        else:
            run_migration(mark_existing=args.mark_existing)
    except Exception as e:
        print(f"\n❌ Migration failed: {e}")
        raise
