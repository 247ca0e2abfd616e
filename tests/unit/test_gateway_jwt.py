"""Unit tests for JWT verification."""

from datetime import timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.fx_common.errors import InvalidCredentialsError
from src.fx_gateway.auth.jwt_handler import create_access_token, decode_access_token


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("user-123")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "access"


def test_decode_valid_access_token() -> None:
    token = create_access_token("user-abc")
    payload = decode_access_token(token)
    assert payload["sub"] == "user-abc"


def test_expired_token_raises_credentials_error() -> None:
    token = create_access_token("user-abc", expires_in=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_tampered_token_raises_error() -> None:
    token = create_access_token("user-abc")
    tampered = token[:-4] + "xxxx"
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(tampered)


def test_token_signed_with_other_secret_rejected() -> None:
    token = jwt.encode({"sub": "user-abc", "type": "access"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)


def test_non_access_token_rejected() -> None:
    """A refresh token from the identity service must not authorize API calls."""
    token = jwt.encode(
        {"sub": "user-abc", "type": "refresh"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidCredentialsError):
        decode_access_token(token)
