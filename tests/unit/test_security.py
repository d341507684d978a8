"""Unit tests for password hashing and access tokens."""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from solosuccess.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from solosuccess.domain.exceptions import TokenExpired, TokenInvalid


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-password", rounds=4)

        assert hashed != "s3cret-password"
        assert verify_password("s3cret-password", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestAccessTokens:

    def test_round_trip_claims(self, test_settings):
        user_id = uuid4()

        token, expires_in = create_access_token(user_id, "founder@example.com")
        claims = decode_access_token(token)

        assert claims["sub"] == str(user_id)
        assert claims["email"] == "founder@example.com"
        assert expires_in == test_settings.access_token_expire_minutes * 60

    def test_custom_lifetime(self):
        _, expires_in = create_access_token(uuid4(), "a@example.com", expires_delta=timedelta(minutes=5))

        assert expires_in == 300

    def test_expired(self):
        token, _ = create_access_token(uuid4(), "a@example.com", expires_delta=timedelta(seconds=-1))

        with pytest.raises(TokenExpired):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": str(uuid4()), "exp": 9999999999}, "another-key", algorithm="HS256")

        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_missing_subject(self, test_settings):
        token = jwt.encode(
            {"exp": 9999999999},
            test_settings.secret_key.get_secret_value(),
            algorithm=test_settings.jwt_algorithm,
        )

        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(TokenInvalid):
            decode_access_token("not.a.token")
