"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["TZ"] = "Asia/Kolkata"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftdesk.main import app  # noqa: E402
from shiftdesk.db.base import Base  # noqa: E402
from shiftdesk.core.deps import get_db, get_notification_sink  # noqa: E402
from shiftdesk.tests.helpers import auth_headers, make_employee  # noqa: E402
from shiftdesk.core.constants import DEFAULT_SHIFTS  # noqa: E402
from shiftdesk.services.notifications import RoutedNotificationSink  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from shiftdesk.models import Role, Shift  # noqa: E402


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingSink(RoutedNotificationSink):
    """Captures emitted events instead of delivering them"""

    def __init__(self):
        self.events = []

    def emit(self, event, rooms, payload):
        self.events.append((event, list(rooms), payload))

    def names(self):
        return [name for name, _, _ in self.events]


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture(scope="function")
def client(db, sink):
    """Test client fixture with database and notification overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sink] = lambda: sink
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db):
    return make_employee(db, "admin@example.com", name="Admin", role=Role.ADMIN, password="adminpass")


@pytest.fixture
def employee_user(db):
    return make_employee(db, "asha@example.com", name="Asha", password="ashapass")


@pytest.fixture
def other_employee(db):
    return make_employee(db, "ravi@example.com", name="Ravi", shift="shift2", password="ravipass")


@pytest.fixture
def shift_catalog(db):
    shifts = [Shift(**definition, is_active=True) for definition in DEFAULT_SHIFTS]
    db.add_all(shifts)
    db.commit()
    return shifts


@pytest.fixture
def admin_headers(client, admin_user):
    return auth_headers(client, "admin@example.com", "adminpass")


@pytest.fixture
def employee_headers(client, employee_user):
    return auth_headers(client, "asha@example.com", "ashapass")
