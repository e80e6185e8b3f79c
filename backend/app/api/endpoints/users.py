"""
User API Endpoints.

Registration of the caller's user record, role lookup, and admin-only
listing, search and role management.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.db.session import get_db, utcnow
from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.schemas.user import (
    UserCreate, UserResponse, UserRegistrationResponse, UserRoleUpdate, UserRoleResponse
)
from backend.app.core.dependencies import get_verified_email, get_current_user
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_admin
from backend.app.core.identifiers import parse_record_id

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List all users, newest first (admin only)."""
    result = await db.execute(select(User).order_by(desc(User.created_at)))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.post(
    "",
    response_model=UserRegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": UserRegistrationResponse, "description": "User already exists"}}
)
async def register_user(
    user_data: UserCreate,
    email: str = Depends(get_verified_email),
    db: AsyncSession = Depends(get_db)
):
    """
    Register the caller's user record.

    Returns 201 for a new user. An existing user gets 200 with inserted=false
    and their last login time refreshed.
    """
    if user_data.email != email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email does not match the authenticated identity"
        )

    result = await db.execute(select(User).where(User.email == email))
    existing_user = result.scalar_one_or_none()

    if existing_user:
        existing_user.last_log_in = utcnow()
        await db.commit()
        body = UserRegistrationResponse(message="User already exists", inserted=False, id=existing_user.id)
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())

    new_user = User(email=email, name=user_data.name, role=UserRole.USER)
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    return UserRegistrationResponse(message="User created", inserted=True, id=new_user.id)


@router.get("/role", response_model=UserRoleResponse)
async def get_user_role(
    email: str = Query(..., description="Email to look up"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Role of the user with this email; 404 if there is none."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundError("User")

    return UserRoleResponse(role=user.role)


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    email: Optional[str] = Query(None, description="Case-insensitive part of an email"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Find users by partial email (admin only), returning every match.

    `%` and `_` in the query match literally. An empty query returns nothing.
    """
    if not email:
        return []

    pattern = email.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    result = await db.execute(
        select(User).where(User.email.ilike(f"%{pattern}%", escape="\\")).order_by(User.email)
    )
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str = Path(..., description="User ID"),
    role_data: UserRoleUpdate = ...,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Grant or revoke a role (admin only)."""
    result = await db.execute(select(User).where(User.id == parse_record_id(user_id)))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundError("User", user_id)

    user.role = role_data.role
    await db.commit()
    await db.refresh(user)

    return UserResponse.model_validate(user)
