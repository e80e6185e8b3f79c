"""
Rider database model.

A rider starts as a PENDING application and becomes ACTIVE once an admin
approves it. work_status tracks whether the rider currently carries a parcel.
"""

from sqlalchemy import Column, String, Float, DateTime, Enum
from backend.app.db.session import Base, utcnow
from backend.app.core.identifiers import generate_id
from backend.app.models.rider_enums import RiderStatus, WorkStatus


class Rider(Base):
    __tablename__ = "riders"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(30), nullable=True)
    district = Column(String(100), nullable=False, index=True)

    status = Column(Enum(RiderStatus), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(Enum(WorkStatus), default=WorkStatus.IDLE, nullable=False)

    # Accumulated on every cash-out
    total_earning = Column(Float, default=0.0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}', work='{self.work_status.value}')>"
