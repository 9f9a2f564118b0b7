import time

import jwt
import pytest

from mytodo.errors import InvalidCredentialsError
from mytodo.gateway.tokens import TokenManager

from conftest import TEST_SECRET, make_settings


@pytest.fixture
def tokens():
    return TokenManager.from_settings(make_settings())


class TestTokenManager:
    def test_round_trip(self, tokens):
        token = tokens.create_token("u1", "ada@example.com")
        claims = tokens.verify_token(token)
        assert claims.user_id == "u1"
        assert claims.email == "ada@example.com"

    def test_expiry_is_24_hours(self, tokens):
        token = tokens.create_token("u1", "ada@example.com")
        decoded = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        assert decoded["exp"] - decoded["iat"] == 24 * 3600

    def test_expired_token_rejected(self, tokens):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "u1", "email": "ada@example.com", "iat": now - 7200, "exp": now - 3600},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidCredentialsError):
            tokens.verify_token(token)

    def test_wrong_secret_rejected(self, tokens):
        other = TokenManager("another-secret")
        with pytest.raises(InvalidCredentialsError):
            tokens.verify_token(other.create_token("u1", "ada@example.com"))

    def test_missing_subject_rejected(self, tokens):
        token = jwt.encode({"email": "ada@example.com", "exp": int(time.time()) + 60}, TEST_SECRET, algorithm="HS256")
        with pytest.raises(InvalidCredentialsError):
            tokens.verify_token(token)

    def test_garbage_rejected(self, tokens):
        with pytest.raises(InvalidCredentialsError):
            tokens.verify_token("not-a-jwt")

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenManager("")
