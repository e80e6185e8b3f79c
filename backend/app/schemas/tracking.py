"""
Tracking event Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class TrackingEventCreate(BaseModel):
    """Schema for appending a tracking event by hand."""
    tracking_id: str = Field(..., min_length=1, max_length=40)
    parcel_id: str = Field(..., description="ID of the tracked parcel")
    status: str = Field(..., min_length=1, max_length=50)
    message: Optional[str] = Field(None, max_length=500)
    updated_by: Optional[str] = Field(None, max_length=255, description="Defaults to the caller's email")


class TrackingEventResponse(BaseModel):
    id: int
    tracking_id: str
    parcel_id: str
    status: str
    message: Optional[str]
    updated_by: Optional[str]
    time: datetime

    class Config:
        from_attributes = True
