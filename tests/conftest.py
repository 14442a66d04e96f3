import pytest
from datetime import datetime, timedelta
from flask_jwt_extended import create_access_token

from app import create_app
from app.extensions import db as _db
from app.services import EXTENSION_KEY
from app.services.booking import BookingService
from app.services.lifecycle import BookingLifecycle
from app.services.notification import NotificationService
from app.services.storage import LocalBlobStore
from config import Config

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key-for-resort-booking-tests'
    BLOB_STORE = 'local'
    NOTIFICATION_STREAM_KEEPALIVE = 1


class FakeClock:
    """Advances by `step` on every call so ordering is deterministic"""

    def __init__(self, start=datetime(2025, 1, 1, 8, 0, 0), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        self.now = self.now + self.step
        return self.now


@pytest.fixture
def app(tmp_path):
    upload_folder = str(tmp_path / 'uploads')
    TestConfig.UPLOAD_FOLDER = upload_folder
    app = create_app(TestConfig, blob_store=LocalBlobStore(upload_folder))

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def runner(app):
    return app.test_cli_runner()

@pytest.fixture
def db(app):
    return _db

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def feed(app):
    return app.extensions[EXTENSION_KEY]['feed']

@pytest.fixture
def blob_store(app):
    return app.extensions[EXTENSION_KEY]['blob_store']

@pytest.fixture
def booking_service(db, blob_store, clock):
    return BookingService(db.session, blob_store, clock=clock)

@pytest.fixture
def notification_service(db, feed, clock):
    return NotificationService(db.session, feed, clock=clock)

@pytest.fixture
def lifecycle(booking_service, notification_service):
    return BookingLifecycle(booking_service, notification_service)

@pytest.fixture
def booking_data():
    return {
        'user_id': 'u1',
        'user_name': 'Juan Dela Cruz',
        'user_email': 'juan@example.com',
        'booking_type': 'cottage',
        'item_name': 'Standard Cottage',
        'booking_date': '2025-02-14',
        'participants': 4,
        'total_amount': 1500,
        'payment_method': 'GCash',
    }


def auth_headers(identity, role='user', **claims):
    token = create_access_token(identity=identity, additional_claims=dict(role=role, **claims))
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def user_headers(app):
    return auth_headers('u1', name='Juan Dela Cruz', email='juan@example.com')

@pytest.fixture
def other_user_headers(app):
    return auth_headers('u2', name='Maria Santos', email='maria@example.com')

@pytest.fixture
def admin_headers(app):
    return auth_headers('staff-1', role='admin', name='Front Desk', email='desk@resort.example')

@pytest.fixture
def make_headers(app):
    return auth_headers
