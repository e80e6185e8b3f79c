"""
Payment API Endpoints.

Payment intents are created at the gateway; completed payments are recorded
in the local payment ledger and mark the parcel paid.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.db.session import get_db
from backend.app.models.payment import Payment
from backend.app.models.user import User
from backend.app.schemas.payment import (
    PaymentCreate, PaymentResponse, PaymentIntentCreate, PaymentIntentResponse
)
from backend.app.core.dependencies import get_current_user
from backend.app.core.guards import ensure_self_or_admin
from backend.app.core.identifiers import parse_record_id
from backend.app.services import parcel_lifecycle
from backend.app.services.payment_gateway import PaymentGateway, get_payment_gateway

router = APIRouter(tags=["Payments"])


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email, defaults to the caller"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Payment history of a payer, newest first.

    Callers may only read their own history unless they are admins.
    """
    email = email or current_user.email
    ensure_self_or_admin(email, current_user, "payment history")

    result = await db.execute(
        select(Payment).where(Payment.email == email).order_by(desc(Payment.paid_at))
    )
    return [PaymentResponse.model_validate(p) for p in result.scalars().all()]


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Record a completed payment and mark the parcel paid."""
    payer_email = payment_data.email or current_user.email
    ensure_self_or_admin(payer_email, current_user, "payment")

    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(payment_data.parcel_id))
    payment = await parcel_lifecycle.record_payment(
        db,
        parcel,
        payer_email=payer_email,
        amount=payment_data.amount,
        payment_method=payment_data.payment_method,
        transaction_id=payment_data.transaction_id,
    )
    return PaymentResponse.model_validate(payment)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent: PaymentIntentCreate,
    current_user: User = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """
    Create a card payment intent at the gateway.

    Returns the client secret the web client confirms the card payment with.
    """
    payment_intent = await gateway.create_payment_intent(intent.amount)
    return PaymentIntentResponse(client_secret=payment_intent["client_secret"])
