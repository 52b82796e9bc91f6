"""FastAPI dependencies: per-request service wiring and the authenticated principal."""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AccessDeniedError, UnauthorizedError
from app.models.role import RoleName
from app.services.auth import AuthService
from app.services.jwt import InvalidTokenError, JWTService, MalformedTokenError, TokenKind, get_jwt_service
from app.services.mail import MailSender, get_mail_sender
from app.services.password import PasswordHasher, get_password_hasher
from app.services.user_store import UserStore

INVALID_TOKEN_DETAIL = "Invalid or expired token"


@dataclass
class CurrentUser:
    """Authenticated user context, built from a verified access token."""

    user_id: int
    email: str
    role: str | None


@dataclass
class RefreshPrincipal:
    """Caller presenting a signature-verified refresh token."""

    user_id: int
    email: str
    refresh_token: str


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: JWTService = Depends(get_jwt_service),
    mailer: MailSender = Depends(get_mail_sender),
) -> AuthService:
    """Assemble the auth service for one request."""
    return AuthService(store=store, hasher=hasher, tokens=tokens, mailer=mailer)


def _bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    raise UnauthorizedError()


def get_current_user(
    request: Request,
    store: UserStore = Depends(get_user_store),
    tokens: JWTService = Depends(get_jwt_service),
) -> CurrentUser:
    """Validate the access token and re-hydrate the user with its role. Raises 401 if invalid."""
    token = _bearer_token(request)
    try:
        payload = tokens.verify(token, TokenKind.ACCESS)
    except (InvalidTokenError, MalformedTokenError):
        raise UnauthorizedError(INVALID_TOKEN_DETAIL) from None

    user = store.find_by_id(payload.id)
    if user is None:
        raise UnauthorizedError(INVALID_TOKEN_DETAIL)

    return CurrentUser(user_id=user.id, email=user.email, role=user.role_name)


def get_refresh_principal(
    request: Request,
    tokens: JWTService = Depends(get_jwt_service),
) -> RefreshPrincipal:
    """Validate a refresh token sent as the bearer credential. Raises 401 if invalid."""
    token = _bearer_token(request)
    try:
        payload = tokens.verify(token, TokenKind.REFRESH)
    except (InvalidTokenError, MalformedTokenError):
        raise UnauthorizedError(INVALID_TOKEN_DETAIL) from None

    return RefreshPrincipal(user_id=payload.id, email=payload.email, refresh_token=token)


def require_roles(*roles: RoleName) -> Callable[..., CurrentUser]:
    """Dependency factory admitting only users holding one of the given roles."""
    allowed = {role.value for role in roles}

    def _require(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise AccessDeniedError("Insufficient role")
        return user

    return _require
