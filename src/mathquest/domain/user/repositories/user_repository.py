"""User and role repository interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from mathquest.domain.user.aggregates.user import User
from mathquest.domain.user.value_objects import RoleName


class UserRepository(ABC):
    """Repository interface for User aggregates."""

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by their username."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email address."""

    @abstractmethod
    async def find_by_verification_token_hash(
        self,
        token_hash: str,
    ) -> Optional[User]:
        """Find the user awaiting verification with this token digest."""

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Check if a user exists with the given username."""

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert or update a user and return it with its id assigned."""

    @abstractmethod
    async def list_all(self, role: RoleName | None = None) -> list[User]:
        """List users that are not soft-deleted, optionally by role."""


class RoleRepository(ABC):
    """Repository interface for persisted roles."""

    @abstractmethod
    async def exists(self, role: RoleName) -> bool:
        """Check whether the row for a role exists."""

    @abstractmethod
    async def add(self, role: RoleName) -> None:
        """Insert the row for a role."""

    @abstractmethod
    async def list_all(self) -> list[RoleName]:
        """List persisted roles in id order."""
