"""
Tracking API Endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.tracking import TrackingEventCreate, TrackingEventResponse
from backend.app.core.dependencies import get_current_user
from backend.app.core.identifiers import parse_record_id
from backend.app.services import parcel_lifecycle
from backend.app.services.tracking import log_event, get_tracking_history

router = APIRouter(tags=["Tracking"])


@router.post("/trackParcel", response_model=TrackingEventResponse, status_code=status.HTTP_201_CREATED)
async def track_parcel(
    event_data: TrackingEventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Append a tracking event for an existing parcel."""
    parcel = await parcel_lifecycle.get_parcel_or_404(db, parse_record_id(event_data.parcel_id))
    if event_data.tracking_id != parcel.tracking_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tracking id does not belong to this parcel"
        )

    event = await log_event(
        db=db,
        tracking_id=event_data.tracking_id,
        parcel_id=parcel.id,
        status=event_data.status,
        message=event_data.message,
        updated_by=event_data.updated_by or current_user.email,
    )
    return TrackingEventResponse.model_validate(event)


@router.get("/track/{tracking_id}", response_model=List[TrackingEventResponse])
async def get_tracking(
    tracking_id: str = Path(..., description="Tracking ID printed on the parcel"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Every tracking event for a tracking id, oldest first."""
    events = await get_tracking_history(db, tracking_id)
    return [TrackingEventResponse.model_validate(e) for e in events]
