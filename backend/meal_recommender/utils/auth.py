"""Bearer token parsing

Tokens are verified by the upstream gateway. This module only decodes the
claims to find out who is calling; it never checks signatures or expiry.
"""

from typing import Optional

import jwt
from pydantic import BaseModel, StrictInt, ValidationError

from ..errors import AuthenticationError

BEARER_PREFIX = "Bearer "


class TokenClaims(BaseModel):
    """Identity claims issued by the auth service"""

    user_id: StrictInt = 0
    email: Optional[str] = None


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the token part of an ``Authorization: Bearer <token>`` header

    Raises:
        AuthenticationError: If the header is missing or not a bearer header
    """
    if not authorization:
        raise AuthenticationError("Authorization header required")

    if not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Invalid authorization format")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("Invalid authorization format")

    return token


def decode_token(token: str) -> TokenClaims:
    """
    Decode JWT claims without verifying the signature

    Raises:
        AuthenticationError: If the token cannot be decoded or its claims
            have the wrong shape
    """
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid token format") from e

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        raise AuthenticationError("Invalid token claims") from e
