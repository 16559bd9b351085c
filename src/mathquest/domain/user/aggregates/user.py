"""User aggregate holding identity, credentials and roles."""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from mathquest.domain.shared.exceptions import InvalidArgumentError
from mathquest.domain.shared.time import ensure_tz_aware, utc_now
from mathquest.domain.user.value_objects import RoleName

NAME_MAX_LENGTH = 50
USERNAME_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 50


def _require_text(field: str, value: str, max_length: int) -> str:
    if value is None or not value.strip():
        msg = f"{field} must not be blank"
        raise InvalidArgumentError(msg)
    if len(value) > max_length:
        msg = f"{field} must be at most {max_length} characters"
        raise InvalidArgumentError(msg)
    return value


class User:
    """
    User aggregate root.

    Users are never removed physically. ``soft_delete`` marks the account
    so it can no longer authenticate while its history stays referenced.
    """

    def __init__(  # noqa: PLR0913
        self,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
        roles: Iterable[RoleName] = (RoleName.STUDENT,),
        id: Optional[int] = None,
        deleted: bool = False,
        temporary_password: bool = False,
        temporary_password_expiry: datetime | None = None,
        enabled: bool = True,
        verification_token_hash: str | None = None,
        created_by_admin: bool = False,
        created_by: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._id = id
        self._first_name = _require_text("firstName", first_name, NAME_MAX_LENGTH)
        self._last_name = _require_text("lastName", last_name, NAME_MAX_LENGTH)
        self._username = _require_text("username", username, USERNAME_MAX_LENGTH)
        self._email = _require_text("email", email, EMAIL_MAX_LENGTH)
        self._password_hash = password_hash
        self._roles = {RoleName(role) for role in roles}
        self._deleted = deleted
        self._temporary_password = temporary_password
        self._temporary_password_expiry = (
            ensure_tz_aware(temporary_password_expiry)
            if temporary_password_expiry
            else None
        )
        self._enabled = enabled
        self._verification_token_hash = verification_token_hash
        self._created_by_admin = created_by_admin
        self._created_by = created_by
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def username(self) -> str:
        return self._username

    @property
    def email(self) -> str:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def roles(self) -> frozenset[RoleName]:
        return frozenset(self._roles)

    @property
    def is_admin(self) -> bool:
        return RoleName.ADMIN in self._roles

    @property
    def deleted(self) -> bool:
        return self._deleted

    @property
    def temporary_password(self) -> bool:
        return self._temporary_password

    @property
    def temporary_password_expiry(self) -> datetime | None:
        return self._temporary_password_expiry

    @property
    def enabled(self) -> bool:
        """False while a self-registered account awaits email verification."""
        return self._enabled

    @property
    def verification_token_hash(self) -> str | None:
        return self._verification_token_hash

    @property
    def created_by_admin(self) -> bool:
        return self._created_by_admin

    @property
    def created_by(self) -> str | None:
        return self._created_by

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def has_role(self, role: RoleName) -> bool:
        return role in self._roles

    def has_expired_temporary_password(self, now: datetime | None = None) -> bool:
        """Return True when a temporary password exists and is past expiry."""
        if not self._temporary_password or self._temporary_password_expiry is None:
            return False
        return (now or utc_now()) > self._temporary_password_expiry

    def soft_delete(self) -> None:
        self._deleted = True
        self._touch()

    def change_password(self, password_hash: str) -> None:
        """Replace the password hash and clear any temporary-password state."""
        self._password_hash = password_hash
        self._temporary_password = False
        self._temporary_password_expiry = None
        self._touch()

    def rehash_password(self, password_hash: str) -> None:
        """Store a new hash of the same password; temporary state is kept."""
        self._password_hash = password_hash
        self._touch()

    def set_temporary_password(
        self,
        password_hash: str,
        valid_for: timedelta,
        now: datetime | None = None,
    ) -> None:
        """Replace the password with one that stops working after valid_for."""
        self._password_hash = password_hash
        self._temporary_password = True
        self._temporary_password_expiry = (now or utc_now()) + valid_for
        self._touch()

    def require_email_verification(self, token_hash: str) -> None:
        """Disable the account until the matching token is confirmed."""
        self._enabled = False
        self._verification_token_hash = token_hash
        self._touch()

    def confirm_email(self) -> None:
        self._enabled = True
        self._verification_token_hash = None
        self._touch()

    def update_profile(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        username: str | None = None,
        email: str | None = None,
    ) -> None:
        if first_name is not None:
            self._first_name = _require_text("firstName", first_name, NAME_MAX_LENGTH)
        if last_name is not None:
            self._last_name = _require_text("lastName", last_name, NAME_MAX_LENGTH)
        if username is not None:
            self._username = _require_text(
                "username", username, USERNAME_MAX_LENGTH
            )
        if email is not None:
            self._email = _require_text("email", email, EMAIL_MAX_LENGTH)
        self._touch()

    def replace_roles(self, roles: Iterable[RoleName]) -> None:
        new_roles = {RoleName(role) for role in roles}
        if not new_roles:
            msg = "A user must hold at least one role"
            raise InvalidArgumentError(msg)
        self._roles = new_roles
        self._touch()

    def _touch(self) -> None:
        self._updated_at = utc_now()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
        roles: Iterable[RoleName] = (RoleName.STUDENT,),
    ) -> "User":
        return cls(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=password_hash,
            roles=roles,
        )

    @classmethod
    def create_by_admin(  # noqa: PLR0913
        cls,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
        roles: Iterable[RoleName],
        created_by: str,
        valid_for: timedelta,
    ) -> "User":
        user = cls(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=password_hash,
            roles=roles,
            created_by_admin=True,
            created_by=created_by,
        )
        user.set_temporary_password(password_hash, valid_for)
        return user

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: int,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
        roles: Iterable[RoleName],
        deleted: bool,
        temporary_password: bool,
        temporary_password_expiry: datetime | None,
        created_by_admin: bool,
        created_by: str | None,
        enabled: bool,
        verification_token_hash: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=password_hash,
            roles=roles,
            deleted=deleted,
            temporary_password=temporary_password,
            temporary_password_expiry=temporary_password_expiry,
            created_by_admin=created_by_admin,
            created_by=created_by,
            enabled=enabled,
            verification_token_hash=verification_token_hash,
            created_at=created_at,
            updated_at=updated_at,
        )

    def assign_id(self, user_id: int) -> None:
        """Record the identity generated by the credential store."""
        if self._id is not None and self._id != user_id:
            msg = "User already has an id"
            raise InvalidArgumentError(msg)
        self._id = user_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        if self._id is None or other._id is None:
            return self is other
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id) if self._id is not None else id(self)

    def __repr__(self) -> str:
        return f"User(id={self._id}, username={self._username!r})"
