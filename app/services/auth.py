"""Authentication service.

Owns the credential and token lifecycle: signup, signin, logout, refresh
rotation, change-password and the forgot/reset password flow. Collaborators
are passed in explicitly; nothing here reaches for a global.

Each user has at most one live refresh token. Its hash is stored on the user
row and replaced whenever a new pair is issued, which invalidates every
earlier refresh token; logout clears it.
"""

import logging
import secrets

from app.config import Settings, get_settings
from app.errors import (
    AccessDeniedError,
    BadRequestError,
    CredentialsIncorrectError,
    CredentialsTakenError,
    NotFoundError,
)
from app.models.role import RoleName
from app.schemas.auth import SignupResponse, TokenPair
from app.schemas.user import UserProfile
from app.services.jwt import InvalidTokenError, JWTService, MalformedTokenError, TokenKind
from app.services.mail import MailDeliveryError, MailSender
from app.services.password import PasswordHasher
from app.services.user_store import DuplicateEmailError, UserStore

logger = logging.getLogger("authkeeper.auth")

FORGOT_PASSWORD_MESSAGE = "Email sent"
INVALID_RESET_TOKEN = "Invalid or expired token"


class AuthService:
    """Handles user registration, authentication and password recovery."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: JWTService,
        mailer: MailSender,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.mailer = mailer
        self.settings = settings or get_settings()

    def signup(self, email: str, password: str) -> SignupResponse:
        """Create a user and sign them in. Raises CredentialsTakenError on a duplicate email."""
        password_hash = self.hasher.hash(password)
        role = self.store.find_role_by_name(RoleName.USER.value)
        try:
            user = self.store.create(email, password_hash, role_id=role.id if role else None)
        except DuplicateEmailError:
            raise CredentialsTakenError() from None

        logger.info("User %d signed up", user.id)
        tokens = self._issue_session(user.id, user.email)
        return SignupResponse(user_id=user.id, access_token=tokens.access_token, refresh_token=tokens.refresh_token)

    def signin(self, email: str, password: str) -> TokenPair:
        """Authenticate by email and password and issue a fresh token pair."""
        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.verify(self.hasher.dummy_hash, password)
            logger.info("Sign-in failed: unknown email")
            raise CredentialsIncorrectError()

        if not self.hasher.verify(user.password_hash, password):
            logger.info("Sign-in failed for user %d: wrong password", user.id)
            raise CredentialsIncorrectError()

        return self._issue_session(user.id, user.email)

    def logout(self, user_id: int) -> bool:
        """Drop the user's refresh token. Idempotent."""
        if self.store.clear_refresh_token(user_id):
            logger.info("User %d logged out", user_id)
        return True

    def refresh_tokens(self, user_id: int, refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new pair.

        The caller has already verified the token's signature; this checks it is
        the one most recently issued to the user.
        """
        user = self.store.find_by_id(user_id)
        if user is None or not user.refresh_token_hash:
            raise AccessDeniedError()

        if not self.hasher.verify(user.refresh_token_hash, refresh_token):
            logger.warning("Stale or foreign refresh token presented for user %d", user_id)
            raise AccessDeniedError()

        return self._issue_session(user.id, user.email)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> UserProfile:
        """Replace the password after checking the current one."""
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        if not self.hasher.verify(user.password_hash, current_password):
            raise BadRequestError("Incorrect password")

        updated = self.store.update(user.id, password_hash=self.hasher.hash(new_password))
        if updated is None:
            raise NotFoundError()
        logger.info("User %d changed password", user.id)
        return UserProfile.model_validate(updated)

    def forgot_password(self, email: str) -> dict[str, str]:
        """Issue and mail a reset token if the account exists.

        The response is the same whether or not it does, and whether or not
        the mail went out.
        """
        user = self.store.find_by_email(email)
        if user is not None:
            token = self.tokens.issue_reset_token(user.id)
            self.store.update(user.id, reset_password_token=token)
            logger.info("Password reset issued for user %d", user.id)

            reset_url = f"{self.settings.FRONTEND_URL.rstrip('/')}/reset-password/{token}"
            try:
                self.mailer.send_reset_password_email(user.email, reset_url, user.first_name)
            except MailDeliveryError:
                logger.error("Password reset email for user %d was not delivered", user.id)

        return {"message": FORGOT_PASSWORD_MESSAGE}

    def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using the most recently issued reset token.

        Every failure raises the same BadRequestError.
        """
        try:
            payload = self.tokens.verify(token, TokenKind.RESET)
        except (InvalidTokenError, MalformedTokenError):
            raise BadRequestError(INVALID_RESET_TOKEN) from None

        user = self.store.find_by_id(payload.user_id)
        if (
            user is None
            or not user.reset_password_token
            or not secrets.compare_digest(user.reset_password_token.encode("utf-8"), token.encode("utf-8"))
        ):
            raise BadRequestError(INVALID_RESET_TOKEN)

        self.store.update(
            user.id,
            password_hash=self.hasher.hash(new_password),
            reset_password_token=None,
        )
        logger.info("Password reset completed for user %d", user.id)

    def _issue_session(self, user_id: int, email: str) -> TokenPair:
        """Issue a pair and make its refresh token the only valid one."""
        tokens = self.tokens.issue_token_pair(user_id, email)
        self.store.update(user_id, refresh_token_hash=self.hasher.hash(tokens.refresh_token))
        return tokens
