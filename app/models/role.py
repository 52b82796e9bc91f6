"""Role model."""

from enum import Enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class RoleName(str, Enum):
    """Role names seeded into the role table."""

    SUPER_ADMIN = "superadmin"
    ADMIN = "admin"
    USER = "user"


class Role(Base):
    """Authorization role attached to users."""

    __tablename__ = "role"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), unique=True, nullable=False)

    users = relationship("User", back_populates="role")
