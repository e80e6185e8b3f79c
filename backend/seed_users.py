"""
Database seeding script for the first admin.

Admins can only be granted by another admin, so the first one is created
here. Run after the database is reachable:

    python -m backend.seed_users admin@example.com "Admin Name"
"""

import asyncio
import sys

from sqlalchemy import select

from backend.app.db.session import AsyncSessionLocal, init_db
from backend.app.models.user import User
from backend.app.models.enums import UserRole
# Registered on Base so init_db creates every table
from backend.app.models.rider import Rider  # noqa: F401
from backend.app.models.parcel import Parcel  # noqa: F401
from backend.app.models.tracking_event import TrackingEvent  # noqa: F401
from backend.app.models.payment import Payment  # noqa: F401


async def seed_admin(email: str, name: str = None) -> User:
    """
    Create the admin user, or promote an existing user with that email.
    """
    await init_db()

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user and user.role == UserRole.ADMIN:
            print(f"ℹ️  {email} is already an admin, skipping seeding")
            return user

        if user:
            user.role = UserRole.ADMIN
            print(f"✅ Promoted {email} to admin")
        else:
            user = User(email=email, name=name, role=UserRole.ADMIN)
            db.add(user)
            print(f"✅ Created admin user {email}")

        await db.commit()
        await db.refresh(user)
        return user


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m backend.seed_users <email> [name]")
        sys.exit(1)
    asyncio.run(seed_admin(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
