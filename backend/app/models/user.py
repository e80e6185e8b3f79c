"""
User database model.

Users are keyed by the email verified from their identity token.
"""

from sqlalchemy import Column, String, DateTime, Enum
from backend.app.db.session import Base, utcnow
from backend.app.core.identifiers import generate_id
from backend.app.models.enums import UserRole


class User(Base):
    """User account with its role."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(150), nullable=True)

    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_log_in = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
