from enum import Enum


class RoleName(str, Enum):
    """Roles a user can hold.

    Declaration order is significant: the persisted role row for a value
    has primary key ``position + 1``.
    """

    STUDENT = "ROLE_STUDENT"
    TEACHER = "ROLE_TEACHER"
    ADMIN = "ROLE_ADMIN"

    @property
    def role_id(self) -> int:
        return list(RoleName).index(self) + 1

    @property
    def short_name(self) -> str:
        return self.value.removeprefix("ROLE_").lower()

    @classmethod
    def from_id(cls, role_id: int) -> "RoleName":
        members = list(cls)
        if not 1 <= role_id <= len(members):
            msg = f"Unknown role id: {role_id}"
            raise ValueError(msg)
        return members[role_id - 1]

    @classmethod
    def parse(cls, value: str) -> "RoleName":
        """Parse ``ROLE_ADMIN``, ``admin`` or ``ADMIN`` into a role."""
        normalized = value.strip().upper()
        if not normalized.startswith("ROLE_"):
            normalized = f"ROLE_{normalized}"
        try:
            return cls(normalized)
        except ValueError:
            msg = f"Unknown role: {value}"
            raise ValueError(msg) from None

    @classmethod
    def from_signup(cls, value: str | None) -> "RoleName":
        """Map the optional signup role to a role, defaulting to student."""
        if value is None:
            return cls.STUDENT
        lowered = value.strip().lower()
        if lowered == "admin":
            return cls.ADMIN
        if lowered == "teacher":
            return cls.TEACHER
        return cls.STUDENT
