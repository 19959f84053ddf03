"""
Sign-in, bearer sessions and role checks.
"""

from datetime import timedelta

import pytest

from tillbook.models import SessionToken
from tillbook.services import session_service
from tillbook.services.auth_service import (
    PasswordValidationError,
    authenticate,
    validate_password_strength,
)
from tillbook.time_utils import utcnow

from conftest import PASSWORD, auth_headers, get_auth_token


@pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "ALLUPPERCASE1!", "NoDigits!!", "NoSpecial123"])
def test_weak_passwords_rejected(password):
    with pytest.raises(PasswordValidationError):
        validate_password_strength(password)


def test_authenticate(db_session, cashier):
    assert authenticate("cashier", PASSWORD).id == cashier.id
    assert authenticate("cashier", "Wrong123!") is None
    assert authenticate("nobody", PASSWORD) is None
    assert cashier.last_login_at is not None


def test_sessions_are_stored_hashed(db_session, cashier):
    session, token = session_service.create_session(cashier.id)
    assert session.token_hash != token
    assert session.token_hash == session_service.hash_token(token)
    assert session_service.validate_session(token).id == cashier.id


def test_expired_and_revoked_sessions(db_session, cashier):
    session, token = session_service.create_session(cashier.id)
    session.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()
    assert session_service.validate_session(token) is None

    _, token = session_service.create_session(cashier.id)
    assert session_service.revoke_session(token) is True
    assert session_service.revoke_session(token) is False
    assert session_service.validate_session(token) is None


def test_deactivated_staff_lose_sessions(db_session, cashier):
    _, token = session_service.create_session(cashier.id)
    cashier.is_active = False
    db_session.commit()

    assert session_service.validate_session(token) is None
    assert db_session.query(SessionToken).filter_by(is_revoked=False).count() == 0


def test_login_me_logout(client, cashier):
    response = client.post('/api/auth/login', json={'username': 'cashier', 'password': PASSWORD})
    assert response.status_code == 200
    assert response.json['success'] is True
    token = response.json['data']['token']

    me = client.get('/api/auth/me', headers=auth_headers(token))
    assert me.status_code == 200
    assert me.json['data']['staff']['username'] == 'cashier'
    assert 'password_hash' not in me.json['data']['staff']

    assert client.post('/api/auth/logout', headers=auth_headers(token)).status_code == 200
    assert client.get('/api/auth/me', headers=auth_headers(token)).status_code == 401


def test_login_failures(client, cashier):
    bad = client.post('/api/auth/login', json={'username': 'cashier', 'password': 'Wrong123!'})
    assert bad.status_code == 401
    assert bad.json['success'] is False

    missing = client.post('/api/auth/login', json={'username': 'cashier'})
    assert missing.status_code == 400
    assert missing.json['error'] == 'validation_error'


def test_protected_routes_need_token(client, db_session):
    assert client.get('/api/tills').status_code == 401
    response = client.get('/api/tills', headers=auth_headers('not-a-token'))
    assert response.status_code == 401
    assert response.json['error'] == 'unauthorized'


def test_staff_cannot_manage_tenders(client, cashier_headers):
    response = client.post('/api/tenders', json={'name': 'CASH'}, headers=cashier_headers)
    assert response.status_code == 403
    assert response.json['error'] == 'forbidden'


def test_manager_can_manage_tenders(client, manager_headers):
    response = client.post('/api/tenders', json={'name': 'CASH', 'classification': 'Cash'}, headers=manager_headers)
    assert response.status_code == 201


def test_get_auth_token_helper(client, manager):
    assert get_auth_token(client, manager.username) is not None
    assert get_auth_token(client, manager.username, 'Wrong123!') is None
