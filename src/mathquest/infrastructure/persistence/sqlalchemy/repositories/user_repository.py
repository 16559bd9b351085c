"""SQLAlchemy implementation of UserRepository."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mathquest.domain.user import (
    EmailTakenError,
    RoleName,
    RoleNotFoundError,
    User,
    UsernameTakenError,
    UserRepository,
)
from mathquest.infrastructure.persistence.sqlalchemy.models import RoleModel, UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: int) -> User | None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return None
        return self._map_to_domain(model)

    async def find_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_verification_token_hash(self, token_hash: str) -> User | None:
        stmt = select(UserModel).where(
            UserModel.verification_token_hash == token_hash,
            UserModel.deleted.is_(False),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def save(self, user: User) -> User:
        existing = (
            await self._find_model_by_id(user.id) if user.id is not None else None
        )
        role_models = await self._load_roles(user.roles)

        try:
            if existing:
                self._update_model(existing, user, role_models)
                await self._session.flush()
                logger.debug("Updated user: %s", user.id)
            else:
                model = self._map_to_model(user, role_models)
                self._session.add(model)
                await self._session.flush()
                user.assign_id(model.id)
                logger.info("Created user: %s (username: %s)", model.id, user.username)
        except IntegrityError as e:
            message = str(e.orig).lower()
            if "username" in message:
                raise UsernameTakenError(user.username) from e
            if "email" in message:
                raise EmailTakenError(user.email) from e
            raise

        return user

    async def list_all(self, role: RoleName | None = None) -> list[User]:
        stmt = select(UserModel).where(UserModel.deleted.is_(False))
        if role is not None:
            stmt = stmt.where(UserModel.roles.any(RoleModel.id == role.role_id))
        stmt = stmt.order_by(UserModel.id)

        result = await self._session.execute(stmt)
        models = result.scalars().all()
        return [self._map_to_domain(model) for model in models]

    async def _find_model_by_id(self, user_id: int) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_roles(self, roles: frozenset[RoleName]) -> list[RoleModel]:
        ids = sorted(role.role_id for role in roles)
        stmt = select(RoleModel).where(RoleModel.id.in_(ids)).order_by(RoleModel.id)
        result = await self._session.execute(stmt)
        models = list(result.scalars().all())

        found = {model.id for model in models}
        for role in roles:
            if role.role_id not in found:
                raise RoleNotFoundError(role.value)
        return models

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            roles=[RoleName(role.name) for role in model.roles],
            deleted=model.deleted,
            temporary_password=model.temporary_password,
            temporary_password_expiry=model.temporary_password_expiry,
            created_by_admin=model.created_by_admin,
            created_by=model.created_by,
            enabled=model.enabled,
            verification_token_hash=model.verification_token_hash,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _map_to_model(self, user: User, role_models: list[RoleModel]) -> UserModel:
        return UserModel(
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            deleted=user.deleted,
            temporary_password=user.temporary_password,
            temporary_password_expiry=user.temporary_password_expiry,
            created_by_admin=user.created_by_admin,
            created_by=user.created_by,
            enabled=user.enabled,
            verification_token_hash=user.verification_token_hash,
            created_at=user.created_at,
            updated_at=user.updated_at,
            roles=role_models,
        )

    def _update_model(
        self,
        model: UserModel,
        user: User,
        role_models: list[RoleModel],
    ) -> None:
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.username = user.username
        model.email = user.email
        model.password_hash = user.password_hash
        model.deleted = user.deleted
        model.temporary_password = user.temporary_password
        model.temporary_password_expiry = user.temporary_password_expiry
        model.created_by_admin = user.created_by_admin
        model.created_by = user.created_by
        model.enabled = user.enabled
        model.verification_token_hash = user.verification_token_hash
        model.updated_at = user.updated_at
        model.roles = role_models
