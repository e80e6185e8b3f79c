"""
Rider status enumerations.
"""

import enum


class RiderStatus(str, enum.Enum):
    """
    Rider application status.

    PENDING riders have applied and await admin approval.
    ACTIVE riders can be assigned parcels.
    """
    PENDING = "pending"
    ACTIVE = "active"


class WorkStatus(str, enum.Enum):
    IDLE = "idle"
    IN_DELIVERY = "in_delivery"
