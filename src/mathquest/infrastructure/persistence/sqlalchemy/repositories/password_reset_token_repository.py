"""SQLAlchemy implementation of PasswordResetTokenRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mathquest.domain.shared.time import ensure_tz_aware, utc_now
from mathquest.domain.user import PasswordResetToken, PasswordResetTokenRepository
from mathquest.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetTokenModel,
)


class PasswordResetTokenRepositorySQLAlchemy(PasswordResetTokenRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: int,
        token_hash: str,
        expires_at: datetime,
    ) -> int:
        model = PasswordResetTokenModel(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=utc_now(),
        )
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def find_unused_by_hash(
        self,
        token_hash: str,
    ) -> Optional[PasswordResetToken]:
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == token_hash,
            PasswordResetTokenModel.used_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return PasswordResetToken(
            id=model.id,
            user_id=model.user_id,
            token_hash=model.token_hash,
            expires_at=ensure_tz_aware(model.expires_at),
            used_at=ensure_tz_aware(model.used_at) if model.used_at else None,
            created_at=ensure_tz_aware(model.created_at),
        )

    async def mark_used(self, token_id: int) -> None:
        stmt = (
            update(PasswordResetTokenModel)
            .where(PasswordResetTokenModel.id == token_id)
            .values(used_at=utc_now())
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def invalidate_all_for_user(self, user_id: int) -> None:
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.user_id == user_id,
                PasswordResetTokenModel.used_at.is_(None),
            )
            .values(used_at=utc_now())
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def count_recent_for_user(self, user_id: int, since: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.user_id == user_id,
                PasswordResetTokenModel.created_at >= since,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()
