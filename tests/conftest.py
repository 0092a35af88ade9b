"""
Community Portal API - Test Configuration and Fixtures
"""
import os
import tempfile

import mongomock
import pytest
from faker import Faker
from fastapi.testclient import TestClient

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['JWT_SECRET'] = 'test-jwt-secret-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['MONGO_TIMEOUT_MS'] = '200'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='portal-uploads-')
os.environ['LOG_LEVEL'] = 'WARNING'

import database
from database import get_db, create_document
from main import app
from schemas import User
from security import create_access_token, get_password_hash

fake = Faker()

TEST_PASSWORD = 'testpassword123'


@pytest.fixture
def db(monkeypatch):
    """Fresh in-memory database for each test"""
    mock_db = mongomock.MongoClient()['community_portal_test']
    monkeypatch.setattr(database, 'db', mock_db)
    return mock_db


@pytest.fixture
def client(db):
    """Test client with the database dependency overridden"""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory inserting a user straight into the database"""
    counter = {'n': 0}

    def _make_user(role='user', phone=None, password=TEST_PASSWORD, **fields):
        counter['n'] += 1
        user = User(
            name=fake.name(),
            email=fake.unique.email(),
            phone=phone or f"0190000{counter['n']:04d}",
            password=get_password_hash(password),
            role=role,
            **fields,
        )
        user_id = create_document(db, 'user', user)
        return {**user.model_dump(exclude={'password'}), 'id': user_id}

    return _make_user


@pytest.fixture
def member_user(make_user):
    return make_user(role='user')


@pytest.fixture
def admin_user(make_user):
    return make_user(role='admin')


def _bearer(user: dict) -> dict:
    return {'Authorization': f"Bearer {create_access_token(user['id'], user['role'])}"}


@pytest.fixture
def headers_for():
    """Build bearer headers for any user dict"""
    return _bearer


@pytest.fixture
def auth_headers(member_user) -> dict:
    """Authentication headers for a regular member"""
    return _bearer(member_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    """Authentication headers for an admin"""
    return _bearer(admin_user)


@pytest.fixture
def event(client, admin_headers):
    """A public upcoming event created through the API"""
    response = client.post(
        '/api/events',
        json={'title': 'Annual Mahfil', 'type': 'mahfil', 'start_date': '2030-01-10T10:00:00'},
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()
