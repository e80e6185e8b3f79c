"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.rider_enums import RiderStatus, WorkStatus


class RiderCreate(BaseModel):
    """
    Schema for a rider application.

    The applicant's email comes from the identity token; a body email, when
    given, must match it.
    """
    name: str = Field(..., min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    district: str = Field(..., min_length=1, max_length=100)


class RiderStatusUpdate(BaseModel):
    status: RiderStatus


class RiderResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str]
    district: str
    status: RiderStatus
    work_status: WorkStatus
    total_earning: float
    created_at: datetime

    class Config:
        from_attributes = True


class RiderEarningsResponse(BaseModel):
    """Summary of what a rider has earned and what is still owed."""
    total_earning: float
    cashed_out_parcels: int
    pending_earning: float
    pending_parcels: int
