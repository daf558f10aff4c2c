"""Tests for Authentication"""

import jwt
import pytest

from meal_recommender.errors import AuthenticationError
from meal_recommender.utils.auth import TokenClaims, extract_bearer_token, decode_token

SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def make_token(payload):
    return jwt.encode(payload, SECRET, algorithm="HS256")


def test_extract_bearer_token():
    """Test extracting the token from the header"""

    assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize("header,message", [
    (None, "Authorization header required"),
    ("", "Authorization header required"),
    ("Basic dXNlcjpwYXNz", "Invalid authorization format"),
    ("bearer abc", "Invalid authorization format"),
    ("Bearer ", "Invalid authorization format"),
    ("Bearer    ", "Invalid authorization format"),
])
def test_extract_bearer_token_rejects(header, message):
    """Test malformed authorization headers"""

    with pytest.raises(AuthenticationError) as exc_info:
        extract_bearer_token(header)

    assert exc_info.value.message == message
    assert exc_info.value.status_code == 401


def test_decode_token():
    """Test decoding claims"""

    claims = decode_token(make_token({"user_id": 42, "email": "cook@example.com"}))

    assert claims == TokenClaims(user_id=42, email="cook@example.com")


def test_decode_token_ignores_signature():
    """Signatures are checked upstream, any key decodes"""

    token = jwt.encode({"user_id": 7}, "some-other-secret-that-is-also-long-enough", algorithm="HS256")

    assert decode_token(token).user_id == 7


def test_decode_token_missing_user_id_defaults_to_zero():
    claims = decode_token(make_token({"email": "cook@example.com"}))

    assert claims.user_id == 0


def test_decode_token_garbage():
    """Test undecodable tokens"""

    with pytest.raises(AuthenticationError) as exc_info:
        decode_token("not-a-jwt")

    assert exc_info.value.message == "Invalid token format"


@pytest.mark.parametrize("payload", [
    {"user_id": "42"},
    {"user_id": 4.5},
    {"user_id": None},
])
def test_decode_token_bad_claims(payload):
    """Test claims with the wrong types"""

    with pytest.raises(AuthenticationError) as exc_info:
        decode_token(make_token(payload))

    assert exc_info.value.message == "Invalid token claims"
