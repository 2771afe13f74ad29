from pathlib import Path
from dotenv import load_dotenv
import pytest

# Load environment variables for tests before the app reads its settings
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from windowquote.main import app
from windowquote.database import Base, get_db
from windowquote.api.auth import get_current_admin
from windowquote.models import AdminUser
from windowquote.utils.auth import get_password_hash


# Never talk to a real SMTP server from booking tests
@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Record notification emails instead of sending them."""
    sent = []
    monkeypatch.setattr(
        "windowquote.services.notifications.send_email",
        lambda recipient, subject, body: sent.append((recipient, subject, body)),
    )
    return sent


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    yield Session
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(session_factory):
    return TestClient(app)


@pytest.fixture
def admin(session_factory):
    db = session_factory()
    user = AdminUser(
        email='owner@example.com',
        password=get_password_hash('secret123'),
        display_name='Owner',
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    db.close()
    return user


@pytest.fixture
def admin_client(client, admin):
    """Client whose requests pass the admin gate without logging in."""
    app.dependency_overrides[get_current_admin] = lambda: admin
    return client


@pytest.fixture
def booking_payload():
    """Build a valid camelCase booking body, overriding any keys given."""

    def build(**overrides):
        payload = {
            'customerName': 'Jane Doe',
            'customerEmail': 'jane@example.com',
            'customerPhone': '8015551234',
            'windowCount': 10,
            'isCommercial': False,
            'exterior': True,
            'interior': False,
            'screens': False,
            'sills': False,
            'gutters': False,
            'solar': False,
            'solarPanelCount': 0,
            'totalPrice': 100,
            'scheduledDate': '2030-06-15',
        }
        payload.update(overrides)
        return payload

    return build
