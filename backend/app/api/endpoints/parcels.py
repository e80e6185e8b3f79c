"""
Parcel API Endpoints.

Parcel submission, listing and deletion, plus the delivery lifecycle
transitions: assignment (admin), pickup, delivery and cash-out (rider).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.db.session import get_db
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import PaymentStatus, DeliveryStatus
from backend.app.models.user import User
from backend.app.schemas.parcel import (
    ParcelCreate, ParcelResponse, RiderAssignment, ParcelDeleteResponse, CashOutResponse
)
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import DuplicateResourceError, ResourceNotFoundError
from backend.app.core.guards import require_admin, require_rider, ensure_self_or_admin, is_admin
from backend.app.core.identifiers import parse_record_id
from backend.app.services import parcel_lifecycle

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Creator email, defaults to the caller"),
    payment_status: Optional[PaymentStatus] = Query(None),
    delivery_status: Optional[DeliveryStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List parcels, newest first.

    Users see their own parcels. Admins see every parcel unless they filter by
    email, and use the status filters to find parcels awaiting assignment.
    """
    if email is None and not is_admin(current_user):
        email = current_user.email
    if email is not None:
        ensure_self_or_admin(email, current_user, "parcel list")

    query = select(Parcel)
    if email is not None:
        query = query.where(Parcel.created_by == email)
    if payment_status is not None:
        query = query.where(Parcel.payment_status == payment_status)
    if delivery_status is not None:
        query = query.where(Parcel.delivery_status == delivery_status)
    query = query.order_by(desc(Parcel.creation_date))

    result = await db.execute(query)
    return [ParcelResponse.model_validate(p) for p in result.scalars().all()]


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Submit a new parcel on behalf of the caller."""
    if parcel_data.tracking_id:
        existing = await db.execute(select(Parcel.id).where(Parcel.tracking_id == parcel_data.tracking_id))
        if existing.scalar_one_or_none():
            raise DuplicateResourceError(
                f"Parcel with tracking id '{parcel_data.tracking_id}' already exists",
                details={"tracking_id": parcel_data.tracking_id}
            )

    parcel = await parcel_lifecycle.submit_parcel(db, parcel_data, current_user.email)
    return ParcelResponse.model_validate(parcel)


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get one parcel by id."""
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))
    return ParcelResponse.model_validate(parcel)


@router.delete("/{parcel_id}", response_model=ParcelDeleteResponse)
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a parcel (creator or admin).

    Returns 404 if no parcel has this id.
    """
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))
    ensure_self_or_admin(parcel.created_by, current_user, "parcel")

    await parcel_lifecycle.delete_parcel(db, parcel)
    return ParcelDeleteResponse(message="Parcel deleted", deleted_count=1)


@router.patch("/{parcel_id}/assign", response_model=ParcelResponse)
async def assign_rider(
    parcel_id: str = Path(..., description="Parcel ID"),
    assignment: RiderAssignment = ...,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Assign an active rider to a paid parcel (admin only).

    The rider's work status becomes in_delivery in the same transaction.
    """
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))
    rider = await parcel_lifecycle.get_rider_or_404(db, parse_record_id(assignment.rider_id))

    parcel = await parcel_lifecycle.assign_rider(db, parcel, rider, admin.email)
    return ParcelResponse.model_validate(parcel)


@router.patch("/{parcel_id}/pickup", response_model=ParcelResponse)
async def pickup_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Mark a parcel as collected and in transit (assigned rider only)."""
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))
    parcel = await parcel_lifecycle.mark_in_transit(db, parcel, rider_user.email)
    return ParcelResponse.model_validate(parcel)


@router.patch("/{parcel_id}/delivered", response_model=ParcelResponse)
async def deliver_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """
    Mark a parcel as delivered (assigned rider only).

    Calling again on a delivered parcel is a no-op.
    """
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))
    parcel = await parcel_lifecycle.mark_delivered(db, parcel, rider_user.email)
    return ParcelResponse.model_validate(parcel)


@router.patch("/{parcel_id}/cashout", response_model=CashOutResponse)
async def cash_out_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Credit the rider's earning for a delivered parcel (assigned rider only)."""
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(parcel_id))

    rider = await parcel_lifecycle.get_rider_by_email(db, rider_user.email)
    if rider is None:
        raise ResourceNotFoundError("Rider", rider_user.email)

    earning = await parcel_lifecycle.cash_out(db, parcel, rider)
    return CashOutResponse(
        parcel=ParcelResponse.model_validate(parcel),
        earning=earning,
        total_earning=rider.total_earning
    )
