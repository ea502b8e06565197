from datetime import timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError

from timesheets.fastapi.core.config import DevSettings, ProdSettings, get_settings
from timesheets.fastapi.core.exceptions import Conflict, NotFound, StorageFailure
from timesheets.fastapi.core.lifespan import ensure_initial_admin
from timesheets.fastapi.crud.user import get_users
from timesheets.fastapi.dependencies.database import unit_of_work
from timesheets.fastapi.models.user import UserRole
from timesheets.security.auth import create_user_token, verify_access_token
from timesheets.security.password import hash_password, verify_password


class FakeSession:
    def __init__(self, commit_error=None):
        self.commit_error = commit_error
        self.committed = False
        self.rolled_back = False

    def commit(self):
        if self.commit_error:
            raise self.commit_error
        self.committed = True

    def rollback(self):
        self.rolled_back = True


class TestUnitOfWork:
    def test_commits_on_success(self):
        session = FakeSession()

        with unit_of_work(session, "save"):
            pass

        assert session.committed
        assert not session.rolled_back

    def test_storage_errors_become_storage_failure(self):
        session = FakeSession(commit_error=OperationalError("COMMIT", {}, Exception("disk I/O error")))

        with pytest.raises(StorageFailure, match="Failed to save timesheet"):
            with unit_of_work(session, "save timesheet"):
                pass

        assert session.rolled_back

    def test_integrity_errors_pass_through(self):
        session = FakeSession(commit_error=IntegrityError("INSERT", {}, Exception("UNIQUE")))

        with pytest.raises(IntegrityError):
            with unit_of_work(session, "clock in"):
                pass

        assert session.rolled_back

    @pytest.mark.parametrize("error", [NotFound("missing"), ValueError("bad")])
    def test_rolls_back_on_any_error(self, error):
        session = FakeSession()

        with pytest.raises(type(error)):
            with unit_of_work(session, "complete project"):
                raise error

        assert session.rolled_back
        assert not session.committed


def test_errors_carry_status_and_code():
    assert Conflict("x").status_code == 409
    assert NotFound("x").code == "NOT_FOUND"
    assert StorageFailure("x").status_code == 500


class TestSecurity:
    def test_password_round_trip(self):
        hashed = hash_password("user123")

        assert verify_password("user123", hashed)
        assert not verify_password("user124", hashed)

    def test_unrecognised_hash_does_not_verify(self):
        assert not verify_password("user123", "not-a-hash")

    def test_token_carries_id_and_role(self):
        payload = verify_access_token(create_user_token(7, "john", "user"))

        assert payload["sub"] == "7"
        assert payload["role"] == "user"

    def test_expired_token_is_rejected(self):
        token = create_user_token(7, "john", "user", expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as excinfo:
            verify_access_token(token)
        assert excinfo.value.status_code == 401


class TestSettings:
    def test_dev_defaults_to_local_sqlite(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = DevSettings(_env_file=None)

        assert settings.DB_URL == "sqlite:///./timesheet.db"

    def test_prod_builds_url_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = ProdSettings(
            _env_file=None, DB_USERNAME="app", DB_PASS="pw", DB_HOST="db", DB_PORT="5432", DB_NAME="timesheets"
        )

        assert settings.DB_URL == "postgresql+psycopg://app:pw@db:5432/timesheets"

    def test_get_settings_picks_mode(self):
        assert isinstance(get_settings("dev"), DevSettings)
        assert isinstance(get_settings("prod"), ProdSettings)

    def test_cors_origins_include_additional(self):
        settings = DevSettings(_env_file=None, ADDITIONAL_CORS_ORIGINS="https://a.example, https://b.example")

        assert "https://a.example" in settings.CORS_ORIGINS
        assert "https://b.example" in settings.CORS_ORIGINS


class TestInitialAdmin:
    def test_created_once(self, db):
        ensure_initial_admin(db)
        ensure_initial_admin(db)

        [admin] = get_users(db, UserRole.ADMIN)
        assert admin.username == "admin"

    def test_skipped_when_an_admin_exists(self, db, admin):
        admin.username = "boss"
        db.commit()

        ensure_initial_admin(db)

        assert [u.username for u in get_users(db, UserRole.ADMIN)] == ["boss"]
