"""
User roles enumeration.

Defines the role types for the parcel service.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Sends parcels and pays for them (default role)
        RIDER: Approved courier who picks up and delivers parcels
        ADMIN: Approves riders, assigns parcels, manages roles
    """
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"
