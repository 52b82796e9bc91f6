"""User store: persistence for users and roles on top of a SQLAlchemy session.

The auth service never touches the session directly; everything it needs
goes through this class. A unique-constraint violation on ``email`` is
re-raised as ``DuplicateEmailError`` so callers can tell a conflict apart from
any other database failure.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.role import Role
from app.models.user import User

logger = logging.getLogger("authkeeper.store")

UPDATABLE_FIELDS = frozenset(
    {
        "email",
        "password_hash",
        "first_name",
        "last_name",
        "role_id",
        "refresh_token_hash",
        "reset_password_token",
    }
)


class DuplicateEmailError(Exception):
    """Email already belongs to another user."""


def _is_email_conflict(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "email" in message and ("unique" in message or "duplicate" in message)


class UserStore:
    """Repository for User and Role records."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_email_conflict(e):
                raise DuplicateEmailError("Email already registered") from e
            raise

    def find_by_email(self, email: str) -> User | None:
        """Exact-match lookup by email."""
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, email: str, password_hash: str, role_id: int | None = None) -> User:
        """Insert a user. Raises DuplicateEmailError if the email is taken."""
        user = User(email=email, password_hash=password_hash, role_id=role_id)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def update(self, user_id: int, **fields: object) -> User | None:
        """Set the given columns on one user. Returns None if the user does not exist."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        user = self.find_by_id(user_id)
        if user is None:
            return None
        for name, value in fields.items():
            setattr(user, name, value)
        self._commit()
        self.db.refresh(user)
        return user

    def clear_refresh_token(self, user_id: int) -> int:
        """Null out the refresh token hash if one is set. Returns the number of rows changed."""
        count = (
            self.db.query(User)
            .filter(User.id == user_id, User.refresh_token_hash.isnot(None))
            .update({User.refresh_token_hash: None}, synchronize_session=False)
        )
        self.db.commit()
        self.db.expire_all()
        return count

    def find_role_by_name(self, name: str) -> Role | None:
        return self.db.query(Role).filter(Role.name == name).first()

    def get_or_create_role(self, name: str) -> Role:
        """Return the named role, inserting it first if needed."""
        role = self.find_role_by_name(name)
        if role is None:
            role = Role(name=name)
            self.db.add(role)
            self._commit()
            self.db.refresh(role)
            logger.info("Created role %s", name)
        return role

    def list_users(self, limit: int = 50, offset: int = 0) -> tuple[list[User], int]:
        """Return a page of users ordered by id, plus the total count."""
        total = self.db.query(func.count(User.id)).scalar() or 0
        users = self.db.query(User).order_by(User.id).offset(offset).limit(limit).all()
        return users, total
