"""JWT Token Service.

Three token classes are signed with independent secrets:

- access:  ``{id, email}``, short-lived, sent on every API call
- refresh: ``{id, email}``, long-lived, exchanged for a new pair
- reset:   ``{userId}``, one hour, single use (enforced by the auth service)

Every token also carries ``iat``, ``exp`` and a random ``jti``, so two tokens
minted in the same second for the same user are still distinct strings.
"""

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from app.config import Settings, get_settings
from app.schemas.auth import TokenPair

RESET_TOKEN_EXPIRE_MINUTES = 60


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    RESET = "reset"


class InvalidTokenError(Exception):
    """Signature does not verify, the token expired, or it cannot be decoded at all."""


class MalformedTokenError(Exception):
    """Token verified but its payload does not have the expected shape."""


class SessionPayload(BaseModel):
    """Payload of access and refresh tokens."""

    id: StrictInt
    email: StrictStr


class ResetPayload(BaseModel):
    """Payload of password reset tokens."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: StrictInt = Field(alias="userId")


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.algorithm = settings.JWT_ALGORITHM
        self._secrets = {
            TokenKind.ACCESS: settings.JWT_SECRET_ACCESS_TOKEN,
            TokenKind.REFRESH: settings.JWT_SECRET_REFRESH_TOKEN,
            TokenKind.RESET: settings.JWT_RESET_PASSWORD_SECRET,
        }
        self._lifetimes = {
            TokenKind.ACCESS: timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
            TokenKind.REFRESH: timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MINUTES),
            TokenKind.RESET: timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES),
        }

    def _sign(self, claims: dict[str, Any], kind: TokenKind) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": now,
            "exp": now + self._lifetimes[kind],
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self.algorithm)

    def issue_access_token(self, user_id: int, email: str) -> str:
        """Create a short-lived access token."""
        return self._sign({"id": user_id, "email": email}, TokenKind.ACCESS)

    def issue_refresh_token(self, user_id: int, email: str) -> str:
        """Create a long-lived refresh token."""
        return self._sign({"id": user_id, "email": email}, TokenKind.REFRESH)

    def issue_token_pair(self, user_id: int, email: str) -> TokenPair:
        """Create an access/refresh pair. Fails as a whole if either signing fails."""
        access_token = self.issue_access_token(user_id, email)
        refresh_token = self.issue_refresh_token(user_id, email)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def issue_reset_token(self, user_id: int) -> str:
        """Create a one-hour password reset token."""
        return self._sign({"userId": user_id}, TokenKind.RESET)

    def verify(self, token: str, kind: TokenKind) -> SessionPayload | ResetPayload:
        """Verify a token against the secret of its class and return the typed payload.

        Raises InvalidTokenError or MalformedTokenError.
        """
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedTokenError(f"Undecodable {kind.value} token") from e

        try:
            claims = jwt.decode(token, self._secrets[kind], algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        model = ResetPayload if kind is TokenKind.RESET else SessionPayload
        try:
            return model.model_validate(claims)
        except ValidationError as e:
            raise MalformedTokenError(f"Unexpected {kind.value} token payload") from e


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
