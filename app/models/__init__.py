"""ORM models. Importing the package registers both tables with Base.metadata."""

from app.models.role import Role, RoleName
from app.models.user import User

__all__ = ["Role", "RoleName", "User"]
