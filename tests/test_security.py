"""
Tests for password hashing, tokens and role checks
"""
import logging
from datetime import timedelta

import pytest
from jose import jwt

from config import settings
from exceptions import AccountInactive, Forbidden, Unauthorized, ValidationError
from security import (
    AccessRole, CustomRole, authorize, create_access_token, decode_token, display_role,
    get_password_hash, parse_role, resolve_role, verify, verify_password,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_differs_from_password(self):
        hashed = get_password_hash('secret123')
        assert hashed != 'secret123'
        assert hashed.startswith('$2')

    def test_verify_correct_password(self):
        assert verify_password('secret123', get_password_hash('secret123')) is True

    def test_verify_wrong_password(self):
        assert verify_password('wrong', get_password_hash('secret123')) is False

    def test_verify_against_garbage_hash(self):
        assert verify_password('secret123', 'not-a-hash') is False

    def test_verify_against_empty_hash(self):
        assert verify_password('secret123', '') is False


class TestRoles:
    """Test role parsing and authorization"""

    def test_parse_known_role(self):
        assert parse_role(' Admin ') is AccessRole.ADMIN

    def test_parse_unknown_role_is_custom(self):
        assert parse_role('Treasurer') == CustomRole('Treasurer')

    def test_display_role_prefers_custom_label(self):
        assert display_role({'role': 'user', 'custom_role': 'Volunteer Lead'}) == CustomRole('Volunteer Lead')
        assert display_role({'role': 'advisor', 'custom_role': ''}) is AccessRole.ADVISOR

    def test_authorize_is_case_insensitive(self):
        authorize({'role': 'Admin '}, ['admin'])
        authorize({'role': 'ADVISOR'}, ['Admin', 'advisor'])

    def test_authorize_rejects_other_access_role(self):
        with pytest.raises(Forbidden) as exc:
            authorize({'role': 'user'}, ['admin'])
        assert 'Required roles: admin' in exc.value.message

    def test_custom_role_never_authorizes(self):
        # a custom label matching an allow-list entry still grants nothing
        with pytest.raises(Forbidden):
            authorize({'role': 'treasurer'}, ['treasurer', 'admin'])

    def test_missing_user_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            authorize(None, ['admin'])

    def test_resolve_other_role_keeps_label(self):
        assert resolve_role('other', ' Imam ') == ('user', 'Imam')

    def test_resolve_other_role_requires_label(self):
        with pytest.raises(ValidationError):
            resolve_role('other', '  ')

    def test_resolve_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            resolve_role('superuser')

    def test_resolve_defaults_to_user(self):
        assert resolve_role(None) == ('user', '')


class TestTokens:
    """Test JWT creation and verification"""

    def test_round_trip_claims(self, member_user):
        payload = decode_token(create_access_token(member_user['id'], 'user'))
        assert payload['sub'] == member_user['id']
        assert payload['role'] == 'user'
        assert 'exp' in payload

    def test_verify_returns_user_without_password(self, db, member_user):
        user = verify(create_access_token(member_user['id'], 'user'), db)
        assert user['id'] == member_user['id']
        assert 'password' not in user

    def test_expired_token_rejected(self, member_user):
        token = create_access_token(member_user['id'], 'user', expires_delta=timedelta(seconds=-10))
        with pytest.raises(Unauthorized):
            decode_token(token)

    def test_wrong_secret_rejected(self, member_user):
        token = jwt.encode({'sub': member_user['id'], 'role': 'admin'}, 'some-other-secret',
                           algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(Unauthorized):
            decode_token(token)

    def test_inactive_user_rejected(self, db, make_user):
        user = make_user(is_active=False)
        with pytest.raises(AccountInactive):
            verify(create_access_token(user['id'], 'user'), db)

    def test_deleted_user_rejected(self, db, member_user):
        token = create_access_token(member_user['id'], 'user')
        db['user'].delete_many({})
        with pytest.raises(Unauthorized):
            verify(token, db)

    def test_invalid_token_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger='portal'):
            with pytest.raises(Unauthorized):
                decode_token('not.a.jwt')
        assert any(getattr(r, 'auth_event', None) == 'token' for r in caplog.records)

    def test_offline_demo_token_rejected_silently(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='portal'):
            with pytest.raises(Unauthorized):
                decode_token(f'{settings.MOCK_TOKEN_PREFIX}1')
        assert caplog.records == []
