"""SQLAlchemy models for roles and the user/role association."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from mathquest.infrastructure.persistence.sqlalchemy.models.base import Base

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("role_id", Integer, ForeignKey("roles.id"), primary_key=True),
)


class RoleModel(Base):
    """One row per RoleName value; the id is assigned by the seeder."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<RoleModel(id={self.id}, name={self.name})>"
