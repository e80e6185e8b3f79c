"""
Tracking log service.

Append-only history of parcel status changes, read back oldest-first.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, asc
from backend.app.models.tracking_event import TrackingEvent


class TrackingStatus:
    """Standardized tracking status labels written by lifecycle transitions."""
    SUBMITTED = "submitted"
    PAID = "paid"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


def record_event(
    db: AsyncSession,
    tracking_id: str,
    parcel_id: str,
    status: str,
    message: Optional[str] = None,
    updated_by: Optional[str] = None
) -> TrackingEvent:
    """
    Stage a tracking event in the current unit of work.

    The caller commits, so the event lands in the same transaction as the
    status change it describes.
    """
    event = TrackingEvent(
        tracking_id=tracking_id,
        parcel_id=parcel_id,
        status=status,
        message=message,
        updated_by=updated_by
    )
    db.add(event)
    return event


async def log_event(
    db: AsyncSession,
    tracking_id: str,
    parcel_id: str,
    status: str,
    message: Optional[str] = None,
    updated_by: Optional[str] = None
) -> TrackingEvent:
    """
    Append a standalone tracking event and commit it.

    Returns:
        Created TrackingEvent instance
    """
    event = record_event(db, tracking_id, parcel_id, status, message, updated_by)
    await db.commit()
    await db.refresh(event)
    return event


async def get_tracking_history(db: AsyncSession, tracking_id: str) -> List[TrackingEvent]:
    """
    Retrieve every event for a tracking id, oldest first.

    Events sharing a timestamp come back in insertion order (by id).
    """
    query = select(TrackingEvent).where(
        TrackingEvent.tracking_id == tracking_id
    ).order_by(asc(TrackingEvent.time), asc(TrackingEvent.id))

    result = await db.execute(query)
    return list(result.scalars().all())
