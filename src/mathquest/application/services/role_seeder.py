"""Ensure every role value has its row in the credential store."""

import logging

from mathquest.domain.user import RoleName, RoleRepository

logger = logging.getLogger(__name__)


class RoleSeeder:
    """Insert missing role rows. Running it again changes nothing."""

    def __init__(self, role_repository: RoleRepository):
        self._role_repo = role_repository

    async def seed(self) -> list[RoleName]:
        """Create the rows that are absent and return the roles added."""
        added: list[RoleName] = []
        for role in RoleName:
            if await self._role_repo.exists(role):
                continue
            await self._role_repo.add(role)
            added.append(role)
            logger.info("Seeded role %s (id=%d)", role.value, role.role_id)

        if not added:
            logger.debug("All roles already present")
        return added
