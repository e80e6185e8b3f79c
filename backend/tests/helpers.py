"""
Shared helpers for building test data.
"""

from backend.app.core.identity import create_identity_token
from backend.app.models.enums import UserRole
from backend.app.models.user import User


def auth_headers(email: str) -> dict:
    return {"Authorization": f"Bearer {create_identity_token(email)}"}


async def create_user(db_session, email: str, role: UserRole = UserRole.USER) -> User:
    user = User(email=email, name=email.split("@")[0], role=role)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def parcel_payload(**overrides) -> dict:
    payload = {
        "title": "Contract documents",
        "parcel_type": "document",
        "cost": 100.0,
        "sender_name": "Sam Sender",
        "sender_district": "Dhaka",
        "sender_address": "12 Lake Road",
        "receiver_name": "Rae Receiver",
        "receiver_district": "Dhaka",
        "receiver_address": "34 Hill Street",
    }
    payload.update(overrides)
    return payload
