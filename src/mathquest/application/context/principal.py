"""Principal: the request-scoped identity of an authenticated user."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from mathquest.domain.user.value_objects import RoleName

if TYPE_CHECKING:
    from mathquest.domain.user import User


@dataclass(frozen=True)
class Principal:
    """Immutable snapshot of the current authenticated user.

    Built fresh from the credential store on every request and discarded
    when the request ends.
    """

    id: int
    username: str
    email: str
    password_hash: str = field(repr=False)
    roles: frozenset[RoleName] = frozenset()

    @classmethod
    def create(cls, user: User) -> Principal:
        if user.id is None:
            msg = "Cannot build a principal for an unsaved user"
            raise ValueError(msg)
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            roles=user.roles,
        )

    @property
    def is_admin(self) -> bool:
        return RoleName.ADMIN in self.roles

    def has_any_role(self, roles: Iterable[RoleName]) -> bool:
        return not self.roles.isdisjoint(roles)

    @property
    def role_names(self) -> list[str]:
        return sorted(role.value for role in self.roles)

    def __str__(self) -> str:
        return f"Principal({self.username})"
