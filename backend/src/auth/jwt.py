"""JWT token generation and validation

This module handles JWT access token creation and validation for authentication.
Tokens carry the user id and role; account management lives outside this
service, so a valid token is trusted as given.

JWT Token Claims Structure:
===========================

Standard JWT Claims:
- sub (Subject): User ID as string
  Example: "u1"
  Purpose: Identifies the user this token belongs to (document owner_id)

- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires (iat + JWT_EXPIRY_MINUTES)

Custom Claims:
- role: "ADMIN" | "USER"
  Purpose: ADMIN holds reviewer capability (review any document)

Security Properties:
- Algorithm: JWT_ALGORITHM setting, HS256 by default (HMAC-SHA256)
- Secret: JWT_SECRET setting (environment or .env)
- Token tamper-proof (signature validation fails if claims modified)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any
import jwt

from config import get_settings


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from settings (environment or .env).

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET is not set (environment or .env)")
    return secret


def create_access_token(user_id: str, role: str) -> str:
    """Create a JWT access token.

    Args:
        user_id: User identifier, becomes the 'sub' claim
        role: User's role (ADMIN, USER)

    Returns:
        str: Signed JWT token

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    settings = get_settings()
    secret = _get_jwt_secret()

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=settings.JWT_EXPIRY_MINUTES)

    payload = {
        'sub': str(user_id),
        'role': role,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    secret = _get_jwt_secret()

    try:
        return jwt.decode(token, secret, algorithms=[get_settings().JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
