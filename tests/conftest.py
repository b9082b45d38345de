import os
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_authcore.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["CORS_ORIGINS"] = "http://allowed.example.com, https://app.example.com"
os.environ["FRONTEND_URL"] = "https://app.example.com"
for _smtp_var in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASSWORD", "SMTP_FROM_EMAIL"):
    os.environ.pop(_smtp_var, None)

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from authcore.api.deps import get_db, get_notifier
from authcore.core.config import settings
from authcore.core.security import PasswordHasher, TokenIssuer
from authcore.errors import NotificationError
from authcore.main import app
from authcore.repositories.user import UserRepository
from authcore.services.auth import AuthService

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


class FakeNotifier:
    """Records reset emails instead of sending them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    async def send_password_reset_email(self, email: str, reset_token: str) -> None:
        if self.fail:
            raise NotificationError("Failed to send password reset email")
        self.sent.append((email, reset_token))


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        try:
            for suffix in ["", "-wal", "-shm"]:
                path = f"{test_db_path}{suffix}"
                if os.path.exists(path):
                    os.remove(path)
            if os.path.exists(temp_db_dir):
                os.rmdir(temp_db_dir)
        except OSError as e:
            print(f"Cleanup failed: {e}")


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture(scope="function")
def client(db_session, notifier):
    """Create a test client with database and notifier dependency overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture(scope="session")
def tokens() -> TokenIssuer:
    return TokenIssuer(settings.secret_key, settings.algorithm)


@pytest.fixture(scope="function")
def service(db: Session, hasher, tokens, notifier) -> AuthService:
    return AuthService(
        users=UserRepository(db),
        hasher=hasher,
        tokens=tokens,
        notifier=notifier,
    )


@pytest.fixture(scope="function")
def signup_data() -> dict:
    return {
        "fullname": "Ada Lovelace",
        "email": "ada@example.com",
        "phone_number": "+14155551234",
        "password": "OldPassword123!",
        "confirm_password": "OldPassword123!",
    }


@pytest.fixture(scope="function")
def registered_user(service: AuthService, signup_data: dict) -> dict:
    """Register a user through the service and return its credentials."""
    service.signup(**signup_data)
    return {"email": signup_data["email"], "password": signup_data["password"]}
