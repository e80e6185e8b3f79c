"""
Security guards for role-based access control.

Roles are resolved from the User store on every request, never from the token.
"""

from typing import List
from fastapi import Depends, HTTPException, status
from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.core.dependencies import get_current_user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/riders/pending")
        async def pending_riders(current_user: User = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        HTTPException 403 if the caller's role is not in allowed_roles
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )
        return current_user

    return role_checker


require_admin = require_role([UserRole.ADMIN])
require_rider = require_role([UserRole.RIDER])


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


def ensure_self_or_admin(requested_email: str, current_user: User, resource_name: str = "resource"):
    """
    Allow access to records keyed by email only for their owner or an admin.

    Raises:
        HTTPException 403 if the caller is neither
    """
    if requested_email != current_user.email and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. You do not have permission to access this {resource_name}."
        )
