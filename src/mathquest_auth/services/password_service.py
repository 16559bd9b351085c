"""Password hashing service using bcrypt.

The length rules live here so request validators and the service agree:
at least ``PASSWORD_MIN_LENGTH`` characters and at most
``PASSWORD_MAX_BYTES`` bytes once UTF-8 encoded, the part of a password
bcrypt actually reads.
"""

import logging

import bcrypt

from mathquest_auth.exceptions import WeakPasswordError

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72

DEFAULT_ROUNDS = 10


def _cost_of(password_hash: str) -> int | None:
    # $2b$<cost>$<22 char salt><31 char digest>
    parts = password_hash.split("$")
    if len(parts) != 4 or not parts[2].isdigit():
        return None
    return int(parts[2])


class PasswordHashingService:
    """bcrypt hashing with this project's password rules.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> password_hash = service.hash("secret123")
    >>> service.verify("secret123", password_hash)
    True
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations)
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Check the password rules, then hash with a fresh salt.

        Raises
        ------
        WeakPasswordError
            If the password breaks a length rule
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if ``password`` matches ``password_hash``.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            logger.warning("Stored password hash is not a bcrypt hash")
            return False

    def validate_strength(self, password: str) -> None:
        """Raise WeakPasswordError unless the password fits the length rules.

        Messages read like the request validators' field messages.
        """
        if not password or not password.strip():
            msg = "Password must not be blank"
            raise WeakPasswordError(msg)

        if len(password) < PASSWORD_MIN_LENGTH:
            msg = f"Password size must be at least {PASSWORD_MIN_LENGTH}"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            msg = f"Password must not exceed {PASSWORD_MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """True when a stored hash was made with a different work factor.

        Sign-in uses this to upgrade hashes after ``bcrypt_rounds`` changes.
        """
        return _cost_of(password_hash) != self._rounds
