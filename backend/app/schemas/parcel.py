"""
Parcel Pydantic schemas.

Defines request and response models for parcel management.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backend.app.models.parcel_enums import ParcelType, PaymentStatus, DeliveryStatus, RiderMoney


class ParcelCreate(BaseModel):
    """Schema for submitting a new parcel."""
    title: str = Field(..., min_length=1, max_length=200, description="Short description of the shipment")
    parcel_type: ParcelType = Field(default=ParcelType.DOCUMENT, description="Document or non-document")
    weight: Optional[float] = Field(None, ge=0, description="Weight in kilograms")
    cost: float = Field(..., ge=0, description="Delivery cost charged to the sender")
    sender_name: str = Field(..., min_length=1, max_length=150)
    sender_district: str = Field(..., min_length=1, max_length=100)
    sender_address: Optional[str] = Field(None, max_length=500)
    receiver_name: str = Field(..., min_length=1, max_length=150)
    receiver_district: str = Field(..., min_length=1, max_length=100)
    receiver_address: Optional[str] = Field(None, max_length=500)
    tracking_id: Optional[str] = Field(None, min_length=4, max_length=40, description="Generated when omitted")


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: str
    tracking_id: str
    title: str
    parcel_type: ParcelType
    weight: Optional[float]
    cost: float
    sender_name: str
    sender_district: str
    sender_address: Optional[str]
    receiver_name: str
    receiver_district: str
    receiver_address: Optional[str]
    created_by: str
    creation_date: datetime
    payment_status: PaymentStatus
    delivery_status: DeliveryStatus
    rider_money: RiderMoney
    assigned_rider: Optional[str]
    rider_email: Optional[str]
    assigned_at: Optional[datetime]
    picked_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cashed_out_at: Optional[datetime]

    class Config:
        from_attributes = True


class RiderAssignment(BaseModel):
    """Schema for assigning a rider to a parcel."""
    rider_id: str = Field(..., description="ID of the active rider")


class ParcelDeleteResponse(BaseModel):
    message: str
    deleted_count: int


class CashOutResponse(BaseModel):
    parcel: ParcelResponse
    earning: float = Field(..., description="Amount credited by this call")
    total_earning: float = Field(..., description="Rider's accumulated earning")
