"""
Pytest fixtures for tillbook backend tests.

Provides the app on an in-memory database, a clean database per test,
a store/location, staff members of each role and their auth headers.
"""

import pytest

from tillbook import create_app
from tillbook.config import TestConfig
from tillbook.extensions import db
from tillbook.models import Customer, Location, Staff, Store
from tillbook.services.auth_service import hash_password


PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def store(db_session):
    store = Store(name="Glow Beauty")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture(scope='function')
def location(db_session, store):
    location = Location(store_id=store.id, name="Lekki")
    db_session.add(location)
    db_session.commit()
    return location


@pytest.fixture(scope='function')
def other_location(db_session, store):
    location = Location(store_id=store.id, name="Ikeja")
    db_session.add(location)
    db_session.commit()
    return location


def _make_staff(db_session, username: str, role: str, location) -> Staff:
    staff = Staff(
        name=username.title(),
        username=username,
        password_hash=hash_password(PASSWORD),
        role=role,
        location_id=location.id,
        location_name=location.name,
    )
    db_session.add(staff)
    db_session.commit()
    return staff


@pytest.fixture(scope='function')
def cashier(db_session, location):
    return _make_staff(db_session, "cashier", "staff", location)


@pytest.fixture(scope='function')
def manager(db_session, location):
    return _make_staff(db_session, "manager", "manager", location)


@pytest.fixture(scope='function')
def customer(db_session):
    customer = Customer(name="Amaka Eze", email="amaka@example.com", phone="08030000000")
    db_session.add(customer)
    db_session.commit()
    return customer


def get_auth_token(client, username: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a staff member."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json['data']['token']
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def cashier_headers(client, cashier):
    return auth_headers(get_auth_token(client, cashier.username))


@pytest.fixture(scope='function')
def manager_headers(client, manager):
    return auth_headers(get_auth_token(client, manager.username))
