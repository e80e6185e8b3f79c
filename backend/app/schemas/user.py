"""
User Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import UserRole


class UserCreate(BaseModel):
    """
    Schema for registering the caller's user record.

    New users always start with the USER role.
    """
    email: EmailStr = Field(..., description="Must match the identity token's email")
    name: Optional[str] = Field(None, max_length=150)


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str]
    role: UserRole
    created_at: datetime
    last_log_in: datetime

    class Config:
        from_attributes = True


class UserRegistrationResponse(BaseModel):
    message: str
    inserted: bool
    id: str


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserRoleResponse(BaseModel):
    role: UserRole
