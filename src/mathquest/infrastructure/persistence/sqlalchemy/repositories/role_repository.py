"""SQLAlchemy implementation of RoleRepository."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mathquest.domain.user import RoleName, RoleRepository
from mathquest.infrastructure.persistence.sqlalchemy.models import RoleModel

logger = logging.getLogger(__name__)


class RoleRepositorySQLAlchemy(RoleRepository):
    """Role rows keyed by ``RoleName.role_id``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, role: RoleName) -> bool:
        stmt = select(RoleModel.id).where(RoleModel.name == role.value)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def add(self, role: RoleName) -> None:
        self._session.add(RoleModel(id=role.role_id, name=role.value))
        await self._session.flush()
        logger.debug("Inserted role row: %s", role.value)

    async def list_all(self) -> list[RoleName]:
        stmt = select(RoleModel).order_by(RoleModel.id)
        result = await self._session.execute(stmt)
        return [RoleName(model.name) for model in result.scalars().all()]
