"""
Payment Pydantic schemas.

Request bodies accept both snake_case and the camelCase keys web clients send.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class PaymentIntentCreate(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., alias="clientSecret")

    class Config:
        populate_by_name = True


class PaymentCreate(BaseModel):
    """Schema for recording a completed payment."""
    parcel_id: str = Field(..., alias="parcelId")
    email: Optional[EmailStr] = Field(None, description="Payer email, defaults to the caller")
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, alias="paymentMethod", max_length=50)
    transaction_id: Optional[str] = Field(None, alias="tnxId", max_length=255)

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    id: str
    parcel_id: str
    email: str
    amount: float
    payment_method: Optional[str]
    transaction_id: Optional[str]
    paid_at: datetime

    class Config:
        from_attributes = True
