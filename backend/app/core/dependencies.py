"""
Authentication dependencies for FastAPI.

The bearer header carries an identity token from the external identity
provider. Missing credentials are 401; credentials that fail verification
are 403.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.core.identity import verify_identity_token
from backend.app.db.session import get_db
from backend.app.models.user import User

# HTTP Bearer security scheme; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_verified_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Verify the caller's identity token and return the asserted email.

    Raises:
        HTTPException: 401 if no bearer token is present,
            403 if the token is invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email = verify_identity_token(credentials.credentials)
    if email is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden access",
        )

    return email


async def get_current_user(
    email: str = Depends(get_verified_email),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the verified email to its User record.

    Raises:
        HTTPException: 403 if the email has no user record
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not registered",
        )

    return user
