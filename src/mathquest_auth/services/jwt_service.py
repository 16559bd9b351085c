"""JWT token service.

Provides JWT token creation and verification for authentication.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol

import jwt

from mathquest_auth.exceptions import ExpiredTokenError, InvalidTokenError
from mathquest_auth.schemas import TokenPayload


class TokenSubject(Protocol):
    """Anything that can be issued a token (a resolved principal)."""

    @property
    def username(self) -> str: ...


class JWTService:
    """Service for JWT token creation and verification.

    Tokens carry the subject identity only. Verifying a token never
    yields roles; callers re-resolve the subject against current data.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token("alice")
    >>> payload = service.verify_token(token)
    >>> print(payload.subject)
    """

    DEFAULT_ACCESS_EXPIRE_HOURS = 24
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        access_token_expire_hours: int = DEFAULT_ACCESS_EXPIRE_HOURS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        access_token_expire_hours
            Hours until access token expires (default 24)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(hours=access_token_expire_hours)

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._access_expire

    def issue(self, principal: TokenSubject) -> str:
        """Issue an access token for a resolved principal."""
        return self.create_access_token(principal.username)

    def create_access_token(
        self,
        subject: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed access token.

        Parameters
        ----------
        subject
            The username the token identifies
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        if not subject:
            msg = "Token subject cannot be empty"
            raise ValueError(msg)

        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + (expires_delta or self._access_expire),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        The signature is checked before any claim is read, so a tampered
        token is reported as invalid even when it is also expired.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        ExpiredTokenError
            If the signature is valid but the token is past its expiry
        InvalidTokenError
            If the signature does not match or the token is malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )

            return TokenPayload(
                subject=str(payload["sub"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
