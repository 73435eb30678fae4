"""Unit tests for JWT token generation and validation"""

import time

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from auth.dependencies import CurrentUser, get_current_user, require_reviewer
from auth.jwt import create_access_token, decode_token
from auth.roles import UserRole, has_permission, has_reviewer_capability
from config import get_settings

TEST_SECRET = 'test-secret-key-256-bits-minimum-length-required-for-security'


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings so each test sees its own environment"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestCreateAccessToken:

    def test_token_contains_correct_claims(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        token = create_access_token(user_id="u1", role="USER")

        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload['sub'] == "u1"
        assert payload['role'] == "USER"
        assert payload['exp'] > payload['iat']

    def test_expiry_from_environment(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', '5')

        payload = decode_token(create_access_token(user_id="u1", role="USER"))

        assert abs(payload['exp'] - payload['iat'] - 300) <= 1

    def test_missing_secret(self, monkeypatch):
        monkeypatch.delenv('JWT_SECRET', raising=False)
        with pytest.raises(ValueError, match="JWT_SECRET"):
            create_access_token(user_id="u1", role="USER")

    def test_secret_read_from_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.delenv('JWT_SECRET', raising=False)
        (tmp_path / ".env").write_text(f"JWT_SECRET={TEST_SECRET}\n")
        monkeypatch.chdir(tmp_path)

        token = create_access_token(user_id="u1", role="ADMIN")

        assert jwt.decode(token, TEST_SECRET, algorithms=["HS256"])["role"] == "ADMIN"


class TestDecodeToken:

    def test_tampered_token_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        token = create_access_token(user_id="u1", role="USER")
        forged = jwt.encode({"sub": "u1", "role": "ADMIN"}, "other-secret", algorithm="HS256")

        assert decode_token(token)["sub"] == "u1"
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(forged)

    def test_expired_token_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        now = int(time.time())
        token = jwt.encode(
            {"sub": "u1", "role": "USER", "iat": now - 120, "exp": now - 60},
            TEST_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)


class TestRoles:

    def test_admin_is_reviewer(self):
        assert has_reviewer_capability(UserRole.ADMIN) is True
        assert has_reviewer_capability(UserRole.USER) is False
        assert has_permission(UserRole.ADMIN, UserRole.USER) is True


class TestDependencies:

    def test_current_user_from_claims(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        user = get_current_user(bearer(create_access_token(user_id="admin1", role="ADMIN")))

        assert user == CurrentUser(user_id="admin1", role=UserRole.ADMIN)
        assert user.is_reviewer is True

    def test_unknown_role_rejected(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer(create_access_token(user_id="u1", role="SUPERUSER")))
        assert exc_info.value.status_code == 401

    def test_garbage_token(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer("not.a.token"))
        assert exc_info.value.status_code == 401

    def test_require_reviewer(self):
        with pytest.raises(HTTPException) as exc_info:
            require_reviewer(CurrentUser(user_id="u1", role=UserRole.USER))
        assert exc_info.value.status_code == 403

        admin = CurrentUser(user_id="admin1", role=UserRole.ADMIN)
        assert require_reviewer(admin) is admin
