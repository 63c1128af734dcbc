import os
import sys
from datetime import date, time, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set testing environment before the application reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ADMIN_SECRET"] = "test-admin-secret"
os.environ["BROADCAST_BACKEND"] = "local"

from clinic.main import app
from clinic.core.database import get_db, Base
from clinic.core.security import StaffRole, get_password_hash
from clinic.models import Appointment, Doctor, PortalSetting, PORTAL_STATUS_KEY
from clinic.realtime.broadcaster import Broadcaster

ADMIN_SECRET = "test-admin-secret"
STAFF_PASSWORD = "Secret123"

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


class RecordingBroadcaster(Broadcaster):
    """Keeps every published message instead of sending it."""

    def __init__(self):
        self.messages = []

    def _send(self, message):
        self.messages.append(message)


class FailingBroadcaster(Broadcaster):
    def _send(self, message):
        raise ConnectionError("broker unavailable")


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def recorder():
    return RecordingBroadcaster()

def make_staff(db, username, role=StaffRole.DOCTOR, name=None, degree="MBBS"):
    staff = Doctor(
        username=username,
        password_hash=get_password_hash(STAFF_PASSWORD),
        role=role,
        name=name or f"Dr. {username.title()}",
        degree=degree,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff

def make_appointment(db, doctor, day=date(2024, 6, 2), at=time(9, 0)):
    appointment = Appointment(
        doctor_id=doctor.id,
        patient_id="firebase-uid-1",
        date=day,
        slot_time=at,
        name="Gregory Patient",
        age=42,
        phone="9876543210",
        description="Sneezing",
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment

def set_portal(db, status):
    db.merge(PortalSetting(setting_key=PORTAL_STATUS_KEY, setting_value=status))
    db.commit()

def auth_headers(client, username):
    response = client.post(
        "/admin-login", json={"username": username, "password": STAFF_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

@pytest.fixture
def doctor(db_session):
    return make_staff(db_session, "house")

@pytest.fixture
def admin(db_session):
    return make_staff(db_session, "cuddy", role=StaffRole.ADMIN, name="Lisa Cuddy")

@pytest.fixture
def admin_headers(client, admin):
    return auth_headers(client, admin.username)

@pytest.fixture
def open_portal(db_session):
    set_portal(db_session, "open")

@pytest.fixture
def future_date():
    # Far enough ahead that no host timezone makes it "today" in the clinic
    return date.today() + timedelta(days=30)
