"""
Parcel status enumerations.
"""

import enum


class ParcelType(str, enum.Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non_document"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class DeliveryStatus(str, enum.Enum):
    """
    Delivery status enumeration.

    Status flow (forward only):
        NOT_COLLECTED → IN_TRANSIT → DELIVERED
    """
    NOT_COLLECTED = "not_collected"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


# Position of each delivery status along the forward-only flow
DELIVERY_SEQUENCE = {
    DeliveryStatus.NOT_COLLECTED: 0,
    DeliveryStatus.IN_TRANSIT: 1,
    DeliveryStatus.DELIVERED: 2,
}


class RiderMoney(str, enum.Enum):
    NONE = "none"
    CASHED_OUT = "cashed_out"
