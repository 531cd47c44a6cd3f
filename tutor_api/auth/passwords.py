"""Password hashing backed by bcrypt."""

import logging

import bcrypt

from tutor_api.core.errors import InternalError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72
DEFAULT_ROUNDS = 12


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted one-way password hashing with an adjustable work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        self._dummy_digest: str | None = None

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh random salt.

        Raises:
            InternalError: If bcrypt fails; this is never the caller's fault.
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")
        except (ValueError, TypeError) as exc:
            raise InternalError("Password hashing failed") from exc

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Check a password against a stored digest.

        A missing or malformed digest counts as a mismatch.
        """
        if not digest:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password digest is malformed; treating as mismatch")
            return False

    def verify_against_dummy(self, plaintext: str) -> bool:
        """Spend the same bcrypt work as ``verify`` when there is no stored digest.

        Always returns False. Login calls this for unknown emails so the
        response time does not reveal whether an account exists.
        """
        if self._dummy_digest is None:
            self._dummy_digest = self.hash("dummy-password-never-matches")
        bcrypt.checkpw(_encode(plaintext), self._dummy_digest.encode("utf-8"))
        return False
