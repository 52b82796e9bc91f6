"""User model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    """Account holding credentials and the current token state."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    role_id = Column(Integer, ForeignKey("role.id"), nullable=True, index=True)
    # Hash of the latest refresh token; NULL means logged out.
    refresh_token_hash = Column(String(256), nullable=True)
    # Literal signed reset token; NULL means no pending reset.
    reset_password_token = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    role = relationship("Role", back_populates="users", lazy="joined")

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None
