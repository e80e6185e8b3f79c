"""
Identity token utilities.

Callers authenticate with an identity token issued by the external identity
provider. This module verifies those tokens and yields the verified email.
`create_identity_token` mints compatible tokens for local development and tests.
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from backend.app.core.config import settings


def create_identity_token(
    email: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create a signed identity token for the given email.

    Args:
        email: Email address the token asserts
        expires_delta: Optional custom expiration time (may be negative)
        extra_claims: Additional claims merged into the payload

    Returns:
        Encoded identity token string

    Example payload:
        {
            "sub": "rider@example.com",
            "email": "rider@example.com",
            "exp": 1234567890
        }
    """
    to_encode: Dict[str, Any] = {"sub": email, "email": email}
    if extra_claims:
        to_encode.update(extra_claims)

    if expires_delta is not None:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.identity_token_expire_minutes)
    to_encode["exp"] = expire

    if settings.identity_audience:
        to_encode.setdefault("aud", settings.identity_audience)
    if settings.identity_issuer:
        to_encode.setdefault("iss", settings.identity_issuer)

    return jwt.encode(to_encode, settings.identity_secret_key, algorithm=settings.identity_algorithm)


def decode_identity_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate an identity token.

    Signature, expiry, and (when configured) audience and issuer are checked.

    Returns:
        Decoded claims if valid, None otherwise
    """
    try:
        return jwt.decode(
            token,
            settings.identity_secret_key,
            algorithms=[settings.identity_algorithm],
            audience=settings.identity_audience,
            issuer=settings.identity_issuer,
            options={"verify_aud": settings.identity_audience is not None},
        )
    except JWTError:
        return None


def verify_identity_token(token: str) -> Optional[str]:
    """Return the verified email asserted by the token, or None if the token is unusable."""
    claims = decode_identity_token(token)
    if claims is None:
        return None

    email = claims.get("email")
    if not email or not isinstance(email, str):
        return None
    return email
