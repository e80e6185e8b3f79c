"""
Rider API Endpoints.

Rider applications and approval (admin), plus the rider's own view of
assigned parcels and earnings.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.db.session import get_db
from backend.app.models.enums import UserRole
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import DeliveryStatus, RiderMoney
from backend.app.models.rider import Rider
from backend.app.models.rider_enums import RiderStatus, WorkStatus
from backend.app.models.user import User
from backend.app.schemas.parcel import ParcelResponse
from backend.app.schemas.rider import (
    RiderCreate, RiderResponse, RiderStatusUpdate, RiderEarningsResponse
)
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import ResourceNotFoundError, RiderUnavailableError
from backend.app.core.guards import require_admin, require_rider
from backend.app.core.identifiers import parse_record_id
from backend.app.services import parcel_lifecycle

router = APIRouter(prefix="/riders", tags=["Riders"])
logger = logging.getLogger("parcel_service.riders")


@router.get("", response_model=List[RiderResponse])
async def list_riders(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All riders, newest application first (admin only)."""
    result = await db.execute(select(Rider).order_by(desc(Rider.created_at)))
    return [RiderResponse.model_validate(r) for r in result.scalars().all()]


@router.post("", response_model=RiderResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_rider(
    rider_data: RiderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a rider application for the caller.

    The application starts as pending until an admin approves it.
    """
    if rider_data.email and rider_data.email != current_user.email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email does not match the authenticated identity"
        )

    if await parcel_lifecycle.get_rider_by_email(db, current_user.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rider application already exists"
        )

    rider = Rider(
        name=rider_data.name,
        email=current_user.email,
        phone=rider_data.phone,
        district=rider_data.district,
        status=RiderStatus.PENDING,
        work_status=WorkStatus.IDLE,
        total_earning=0.0,
    )
    db.add(rider)
    await db.commit()
    await db.refresh(rider)

    logger.info("Rider application %s submitted by %s", rider.id, rider.email)
    return RiderResponse.model_validate(rider)


@router.get("/pending", response_model=List[RiderResponse])
async def list_pending_riders(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Applications awaiting approval (admin only)."""
    result = await db.execute(
        select(Rider).where(Rider.status == RiderStatus.PENDING).order_by(Rider.created_at)
    )
    return [RiderResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/active", response_model=List[RiderResponse])
async def list_active_riders(
    district: Optional[str] = Query(None, description="Only riders in this district"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approved riders, optionally narrowed to one district (admin only)."""
    query = select(Rider).where(Rider.status == RiderStatus.ACTIVE)
    if district:
        query = query.where(Rider.district == district)

    result = await db.execute(query.order_by(Rider.name))
    return [RiderResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/activeRiders", response_model=List[RiderResponse])
async def list_available_riders(
    district: Optional[str] = Query(None, description="District of the parcel to assign"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Active riders free to take a parcel (admin only)."""
    query = select(Rider).where(
        Rider.status == RiderStatus.ACTIVE,
        Rider.work_status == WorkStatus.IDLE
    )
    if district:
        query = query.where(Rider.district == district)

    result = await db.execute(query.order_by(Rider.name))
    return [RiderResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/earnings", response_model=RiderEarningsResponse)
async def get_rider_earnings(
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """The caller's cashed-out total and what delivered parcels still owe them."""
    rider = await parcel_lifecycle.get_rider_by_email(db, rider_user.email)
    if rider is None:
        raise ResourceNotFoundError("Rider", rider_user.email)

    result = await db.execute(
        select(Parcel).where(
            Parcel.assigned_rider == rider.id,
            Parcel.delivery_status == DeliveryStatus.DELIVERED
        )
    )
    delivered = result.scalars().all()
    pending = [p for p in delivered if p.rider_money != RiderMoney.CASHED_OUT]

    return RiderEarningsResponse(
        total_earning=rider.total_earning,
        cashed_out_parcels=len(delivered) - len(pending),
        pending_earning=round(sum(parcel_lifecycle.calculate_rider_earning(p) for p in pending), 2),
        pending_parcels=len(pending),
    )


@router.get("/parcels", response_model=List[ParcelResponse])
async def list_assigned_parcels(
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Parcels assigned to the caller that are not delivered yet."""
    result = await db.execute(
        select(Parcel).where(
            Parcel.rider_email == rider_user.email,
            Parcel.delivery_status != DeliveryStatus.DELIVERED
        ).order_by(Parcel.assigned_at)
    )
    return [ParcelResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/completed-parcels", response_model=List[ParcelResponse])
async def list_completed_parcels(
    rider_user: User = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Parcels the caller has delivered, most recent first."""
    result = await db.execute(
        select(Parcel).where(
            Parcel.rider_email == rider_user.email,
            Parcel.delivery_status == DeliveryStatus.DELIVERED
        ).order_by(desc(Parcel.delivered_at))
    )
    return [ParcelResponse.model_validate(p) for p in result.scalars().all()]


@router.patch("/{rider_id}/status", response_model=RiderResponse)
async def update_rider_status(
    rider_id: str = Path(..., description="Rider ID"),
    status_data: RiderStatusUpdate = ...,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or suspend a rider (admin only).

    Approval promotes the rider's user record to the rider role; moving back
    to pending demotes it to a plain user. A rider in delivery cannot be
    moved back to pending.
    """
    rider = await parcel_lifecycle.get_rider_or_404(db, parse_record_id(rider_id))
    if status_data.status == RiderStatus.PENDING and rider.work_status == WorkStatus.IN_DELIVERY:
        raise RiderUnavailableError(
            "Rider is in delivery and cannot be suspended until the parcel is delivered or reassigned",
            details={"rider_id": rider.id}
        )
    rider.status = status_data.status

    result = await db.execute(select(User).where(User.email == rider.email))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Rider %s has no user record for %s", rider.id, rider.email)
    elif status_data.status == RiderStatus.ACTIVE and user.role == UserRole.USER:
        user.role = UserRole.RIDER
    elif status_data.status == RiderStatus.PENDING and user.role == UserRole.RIDER:
        user.role = UserRole.USER

    await db.commit()
    await db.refresh(rider)

    logger.info("Rider %s set to %s by %s", rider.id, rider.status.value, admin.email)
    return RiderResponse.model_validate(rider)
