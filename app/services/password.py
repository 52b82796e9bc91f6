"""Password hashing service (Argon2id)."""

import secrets

from argon2 import PasswordHasher as _Argon2Hasher
from argon2 import Type
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from app.config import get_settings


class PasswordHasher:
    """Produces and verifies memory-hard, self-describing password hashes.

    Also used for refresh tokens, which are stored hashed like passwords.
    """

    def __init__(
        self,
        time_cost: int | None = None,
        memory_cost: int | None = None,
        parallelism: int | None = None,
    ) -> None:
        params: dict[str, int] = {}
        if time_cost is not None:
            params["time_cost"] = time_cost
        if memory_cost is not None:
            params["memory_cost"] = memory_cost
        if parallelism is not None:
            params["parallelism"] = parallelism
        self._hasher = _Argon2Hasher(type=Type.ID, **params)
        self._dummy_hash: str | None = None

    @property
    def dummy_hash(self) -> str:
        """Hash to verify against when there is no stored hash, so timing does not reveal that."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        return self._dummy_hash

    def hash(self, plaintext: str) -> str:
        """Hash a secret. The result embeds algorithm parameters and salt."""
        return self._hasher.hash(plaintext)

    def verify(self, hashed: str, plaintext: str) -> bool:
        """Return True if the plaintext matches the stored hash.

        A mismatch or an unparseable stored hash is a plain False; any other
        argon2 failure propagates.
        """
        try:
            return self._hasher.verify(hashed, plaintext)
        except (VerifyMismatchError, InvalidHashError):
            return False


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher configured from settings."""
    global _password_hasher
    if _password_hasher is None:
        settings = get_settings()
        _password_hasher = PasswordHasher(
            time_cost=settings.ARGON2_TIME_COST,
            memory_cost=settings.ARGON2_MEMORY_COST,
            parallelism=settings.ARGON2_PARALLELISM,
        )
    return _password_hasher
