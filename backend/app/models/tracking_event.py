"""
Tracking Event database model.

Append-only log of parcel status changes. Rows are never updated or deleted,
so there is no updated_at. parcel_id is a plain reference (not a foreign key)
so the history outlives a deleted parcel.
"""

from sqlalchemy import Column, Integer, String, DateTime
from backend.app.db.session import Base, utcnow


class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    tracking_id = Column(String(40), nullable=False, index=True)
    parcel_id = Column(String(32), nullable=False, index=True)

    status = Column(String(50), nullable=False)
    message = Column(String(500), nullable=True)
    updated_by = Column(String(255), nullable=True)

    time = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking='{self.tracking_id}', status='{self.status}')>"
