"""Error taxonomy for the authentication service.

Each error carries the HTTP status the API layer responds with, so routers
never translate service failures by hand; ``main.py`` registers a single
handler for ``AuthError``.
"""


class AuthError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class CredentialsIncorrectError(AuthError):
    status_code = 403
    default_detail = "Credentials incorrect"


class CredentialsTakenError(AuthError):
    status_code = 403
    default_detail = "Credentials taken"


class AccessDeniedError(AuthError):
    status_code = 403
    default_detail = "Access Denied"


class NotFoundError(AuthError):
    status_code = 404
    default_detail = "User not found"


class BadRequestError(AuthError):
    status_code = 400
    default_detail = "Bad request"


class UnauthorizedError(AuthError):
    status_code = 401
    default_detail = "Not authenticated"


class UnexpectedError(AuthError):
    """Crypto, transport or store failure with no more specific meaning."""

    status_code = 500
    default_detail = "Internal server error"
