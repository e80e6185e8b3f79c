"""
Parcel database model.

A parcel moves through: created → paid → rider assigned → in transit →
delivered → (optionally) cashed out by its rider.
"""

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Enum
from backend.app.db.session import Base, utcnow
from backend.app.core.identifiers import generate_id
from backend.app.models.parcel_enums import ParcelType, PaymentStatus, DeliveryStatus, RiderMoney


class Parcel(Base):
    """
    Parcel model.

    Created by a user; the creator's email is stored in created_by.
    The assigned rider is referenced both by id and by email so rider-side
    queries do not need a join.
    """
    __tablename__ = "parcels"

    id = Column(String(32), primary_key=True, default=generate_id)
    tracking_id = Column(String(40), unique=True, nullable=False, index=True)

    # Shipment description
    title = Column(String(200), nullable=False)
    parcel_type = Column(Enum(ParcelType), default=ParcelType.DOCUMENT, nullable=False)
    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=False, default=0.0)

    # Sender / receiver
    sender_name = Column(String(150), nullable=False)
    sender_district = Column(String(100), nullable=False)
    sender_address = Column(String(500), nullable=True)
    receiver_name = Column(String(150), nullable=False)
    receiver_district = Column(String(100), nullable=False)
    receiver_address = Column(String(500), nullable=True)

    # Ownership
    created_by = Column(String(255), nullable=False, index=True)
    creation_date = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Lifecycle
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False, index=True)
    delivery_status = Column(Enum(DeliveryStatus), default=DeliveryStatus.NOT_COLLECTED, nullable=False, index=True)
    rider_money = Column(Enum(RiderMoney), default=RiderMoney.NONE, nullable=False)

    # Rider assignment
    assigned_rider = Column(String(32), ForeignKey('riders.id'), nullable=True, index=True)
    rider_email = Column(String(255), nullable=True, index=True)

    # Transition timestamps
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    picked_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cashed_out_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking='{self.tracking_id}', delivery='{self.delivery_status.value}')>"
