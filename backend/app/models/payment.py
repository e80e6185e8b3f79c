"""
Payment Record database model.

Immutable record of a completed payment, kept independently of the
payment gateway's own state. NO updates or deletions allowed.
"""

from sqlalchemy import Column, String, Float, DateTime
from backend.app.db.session import Base, utcnow
from backend.app.core.identifiers import generate_id


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=generate_id)

    parcel_id = Column(String(32), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(255), nullable=True, index=True)

    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id='{self.parcel_id}', amount={self.amount})>"
