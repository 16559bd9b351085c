"""Password reset token repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PasswordResetToken:
    """A stored reset token. Only the digest of the emailed value is kept."""

    id: int
    user_id: int
    token_hash: str
    expires_at: datetime
    used_at: Optional[datetime]
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_used(self) -> bool:
        return self.used_at is not None


class PasswordResetTokenRepository(ABC):
    """Repository interface for password reset tokens."""

    @abstractmethod
    async def create(
        self,
        user_id: int,
        token_hash: str,
        expires_at: datetime,
    ) -> int:
        """Store a new token and return its id.

        Parameters
        ----------
        user_id
            The user the token resets
        token_hash
            SHA-256 digest of the raw token
        expires_at
            When the token stops being accepted
        """

    @abstractmethod
    async def find_unused_by_hash(
        self,
        token_hash: str,
    ) -> Optional[PasswordResetToken]:
        """Find a token that has not been used, expired or not."""

    @abstractmethod
    async def mark_used(self, token_id: int) -> None:
        """Mark a token as used."""

    @abstractmethod
    async def invalidate_all_for_user(self, user_id: int) -> None:
        """Mark every unused token of a user as used."""

    @abstractmethod
    async def count_recent_for_user(self, user_id: int, since: datetime) -> int:
        """Count tokens created for a user since ``since``."""
