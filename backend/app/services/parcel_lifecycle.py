"""
Parcel delivery lifecycle.

    created → paid → rider_assigned → in_transit → delivered → cashed_out

Each transition updates the parcel (and the rider where one is involved)
and stages a tracking event in the same session, then commits once, so the
records written by one transition land together. Cash-out writes no
tracking event.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    DuplicateResourceError,
    InsufficientPermissionsError,
    InvalidTransitionError,
    ResourceNotFoundError,
    RiderUnavailableError,
)
from backend.app.core.identifiers import generate_tracking_id
from backend.app.db.session import utcnow
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import (
    DELIVERY_SEQUENCE,
    DeliveryStatus,
    PaymentStatus,
    RiderMoney,
)
from backend.app.models.payment import Payment
from backend.app.models.rider import Rider
from backend.app.models.rider_enums import RiderStatus, WorkStatus
from backend.app.schemas.parcel import ParcelCreate
from backend.app.services.tracking import TrackingStatus, record_event

logger = logging.getLogger("parcel_service.lifecycle")


async def get_parcel_or_404(db: AsyncSession, parcel_id: str) -> Parcel:
    result = await db.execute(select(Parcel).where(Parcel.id == parcel_id))
    parcel = result.scalar_one_or_none()
    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)
    return parcel


async def get_rider_or_404(db: AsyncSession, rider_id: str) -> Rider:
    result = await db.execute(select(Rider).where(Rider.id == rider_id))
    rider = result.scalar_one_or_none()
    if not rider:
        raise ResourceNotFoundError("Rider", rider_id)
    return rider


async def get_rider_by_email(db: AsyncSession, email: str) -> Optional[Rider]:
    result = await db.execute(select(Rider).where(Rider.email == email))
    return result.scalar_one_or_none()


def calculate_rider_earning(parcel: Parcel) -> float:
    """
    Rider's share of the parcel cost.

    Deliveries within one district pay the local rate, cross-district
    deliveries the remote rate.
    """
    same_district = (
        (parcel.sender_district or "").strip().lower()
        == (parcel.receiver_district or "").strip().lower()
    )
    rate = settings.rider_local_earning_rate if same_district else settings.rider_remote_earning_rate
    return round((parcel.cost or 0.0) * rate, 2)


def ensure_assigned_rider(parcel: Parcel, rider_email: str):
    """Only the rider a parcel is assigned to may move it forward."""
    if parcel.rider_email is None or parcel.rider_email != rider_email:
        raise InsufficientPermissionsError(
            "Parcel is not assigned to you",
            details={"parcel_id": parcel.id}
        )


def _advance_delivery_status(parcel: Parcel, target: DeliveryStatus) -> bool:
    """
    Move delivery_status forward to target.

    Returns:
        True if the status changed, False if the parcel was already there

    Raises:
        InvalidTransitionError: if target lies behind the current status
    """
    current = parcel.delivery_status
    if DELIVERY_SEQUENCE[target] < DELIVERY_SEQUENCE[current]:
        raise InvalidTransitionError(
            f"Cannot move parcel from {current.value} back to {target.value}",
            details={"parcel_id": parcel.id, "current": current.value, "requested": target.value}
        )
    if target == current:
        return False
    parcel.delivery_status = target
    return True


async def _release_rider(db: AsyncSession, rider_id: Optional[str]):
    if not rider_id:
        return
    result = await db.execute(select(Rider).where(Rider.id == rider_id))
    rider = result.scalar_one_or_none()
    if rider:
        rider.work_status = WorkStatus.IDLE


async def submit_parcel(db: AsyncSession, parcel_data: ParcelCreate, creator_email: str) -> Parcel:
    """
    Store a new unpaid parcel and log its submission.

    Raises:
        DuplicateResourceError: if the tracking id is already taken
    """
    values = parcel_data.model_dump(exclude={"tracking_id"})
    tracking_id = parcel_data.tracking_id or generate_tracking_id()
    parcel = Parcel(
        **values,
        tracking_id=tracking_id,
        created_by=creator_email,
        payment_status=PaymentStatus.UNPAID,
        delivery_status=DeliveryStatus.NOT_COLLECTED,
        rider_money=RiderMoney.NONE,
    )
    db.add(parcel)
    # Flush assigns the id the tracking event points at
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceError(
            f"Parcel with tracking id '{tracking_id}' already exists",
            details={"tracking_id": tracking_id}
        )

    record_event(
        db,
        tracking_id=parcel.tracking_id,
        parcel_id=parcel.id,
        status=TrackingStatus.SUBMITTED,
        message=f"Parcel '{parcel.title}' created",
        updated_by=creator_email,
    )
    await db.commit()
    await db.refresh(parcel)

    logger.info("Parcel %s submitted by %s (tracking %s)", parcel.id, creator_email, parcel.tracking_id)
    return parcel


async def record_payment(
    db: AsyncSession,
    parcel: Parcel,
    payer_email: str,
    amount: float,
    payment_method: Optional[str] = None,
    transaction_id: Optional[str] = None
) -> Payment:
    """Mark the parcel paid and write its immutable payment record."""
    if parcel.payment_status == PaymentStatus.PAID:
        raise InvalidTransitionError(
            "Parcel is already paid",
            details={"parcel_id": parcel.id}
        )

    parcel.payment_status = PaymentStatus.PAID
    payment = Payment(
        parcel_id=parcel.id,
        email=payer_email,
        amount=amount,
        payment_method=payment_method,
        transaction_id=transaction_id,
    )
    db.add(payment)
    record_event(
        db,
        tracking_id=parcel.tracking_id,
        parcel_id=parcel.id,
        status=TrackingStatus.PAID,
        message=f"Paid {amount} via {payment_method or 'unknown method'}",
        updated_by=payer_email,
    )
    await db.commit()
    await db.refresh(payment)

    logger.info("Parcel %s paid by %s (transaction %s)", parcel.id, payer_email, transaction_id)
    return payment


async def assign_rider(db: AsyncSession, parcel: Parcel, rider: Rider, actor_email: str) -> Parcel:
    """
    Assign an active, idle rider to a paid parcel and mark the rider busy.

    Re-assigning a parcel frees its previous rider. Assigning the same rider
    again changes nothing.
    """
    if parcel.payment_status != PaymentStatus.PAID:
        raise InvalidTransitionError(
            "Parcel must be paid before a rider can be assigned",
            details={"parcel_id": parcel.id}
        )
    if parcel.delivery_status == DeliveryStatus.DELIVERED:
        raise InvalidTransitionError(
            "Parcel is already delivered",
            details={"parcel_id": parcel.id}
        )
    if rider.status != RiderStatus.ACTIVE:
        raise RiderUnavailableError("Rider is not active", details={"rider_id": rider.id})

    if parcel.assigned_rider == rider.id:
        return parcel

    if rider.work_status == WorkStatus.IN_DELIVERY:
        raise RiderUnavailableError("Rider is already in delivery", details={"rider_id": rider.id})

    await _release_rider(db, parcel.assigned_rider)

    parcel.assigned_rider = rider.id
    parcel.rider_email = rider.email
    parcel.assigned_at = utcnow()
    rider.work_status = WorkStatus.IN_DELIVERY

    record_event(
        db,
        tracking_id=parcel.tracking_id,
        parcel_id=parcel.id,
        status=TrackingStatus.RIDER_ASSIGNED,
        message=f"Assigned to rider {rider.name}",
        updated_by=actor_email,
    )
    await db.commit()
    await db.refresh(parcel)
    await db.refresh(rider)

    logger.info("Parcel %s assigned to rider %s by %s", parcel.id, rider.id, actor_email)
    return parcel


async def mark_in_transit(db: AsyncSession, parcel: Parcel, rider_email: str) -> Parcel:
    """Rider has collected the parcel."""
    ensure_assigned_rider(parcel, rider_email)

    if not _advance_delivery_status(parcel, DeliveryStatus.IN_TRANSIT):
        return parcel

    parcel.picked_at = utcnow()
    record_event(
        db,
        tracking_id=parcel.tracking_id,
        parcel_id=parcel.id,
        status=TrackingStatus.IN_TRANSIT,
        message="Parcel picked up by rider",
        updated_by=rider_email,
    )
    await db.commit()
    await db.refresh(parcel)

    logger.info("Parcel %s in transit with %s", parcel.id, rider_email)
    return parcel


async def mark_delivered(db: AsyncSession, parcel: Parcel, rider_email: str) -> Parcel:
    """
    Rider has handed the parcel over.

    A repeat call leaves the parcel as it is and appends no event.
    """
    ensure_assigned_rider(parcel, rider_email)

    if not _advance_delivery_status(parcel, DeliveryStatus.DELIVERED):
        return parcel

    parcel.delivered_at = utcnow()
    await _release_rider(db, parcel.assigned_rider)
    record_event(
        db,
        tracking_id=parcel.tracking_id,
        parcel_id=parcel.id,
        status=TrackingStatus.DELIVERED,
        message=f"Delivered to {parcel.receiver_name}",
        updated_by=rider_email,
    )
    await db.commit()
    await db.refresh(parcel)

    logger.info("Parcel %s delivered by %s", parcel.id, rider_email)
    return parcel


async def cash_out(db: AsyncSession, parcel: Parcel, rider: Rider) -> float:
    """
    Credit the rider's earning for a delivered parcel.

    Returns:
        The amount credited; 0.0 if the parcel was already cashed out
    """
    ensure_assigned_rider(parcel, rider.email)

    if parcel.delivery_status != DeliveryStatus.DELIVERED:
        raise InvalidTransitionError(
            "Only delivered parcels can be cashed out",
            details={"parcel_id": parcel.id, "current": parcel.delivery_status.value}
        )
    if parcel.rider_money == RiderMoney.CASHED_OUT:
        return 0.0

    earning = calculate_rider_earning(parcel)
    parcel.rider_money = RiderMoney.CASHED_OUT
    parcel.cashed_out_at = utcnow()
    rider.total_earning = round((rider.total_earning or 0.0) + earning, 2)

    await db.commit()
    await db.refresh(parcel)
    await db.refresh(rider)

    logger.info("Rider %s cashed out %.2f for parcel %s", rider.id, earning, parcel.id)
    return earning


async def delete_parcel(db: AsyncSession, parcel: Parcel):
    """Remove a parcel, freeing its rider if the delivery was still open."""
    if parcel.delivery_status != DeliveryStatus.DELIVERED:
        await _release_rider(db, parcel.assigned_rider)
    await db.delete(parcel)
    await db.commit()

    logger.info("Parcel %s deleted", parcel.id)
