"""
Ownership-scoped repository.

Generic async SQLAlchemy CRUD where every statement is filtered by the
caller's ``owner_id``. The session is injected by the caller, so the same
class works against the application database and the test database.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mclp_backend.app.core.exceptions import ResourceNotFoundError, StoreError
from mclp_backend.app.services.validation import ENTITY_SCHEMAS, validate

logger = logging.getLogger("mclp.repository")

T = TypeVar("T")

# Keys a client may send but that are always set by the server
_PROTECTED_FIELDS = ("id", "owner_id", "created_at", "updated_at", "uploaded_at")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OwnedRepository(Generic[T]):
    """
    Ownership-scoped CRUD over one model.

    Args:
        session: database session (the store handle)
        model: SQLAlchemy model class with an ``owner_id`` column
        entity_kind: validator entity kind for create/update payloads
        resource_name: name used in "not found" messages
        date_field: column used for the default newest-first ordering
        created_field: timestamp column stamped on create
    """

    def __init__(
        self,
        session: AsyncSession,
        model: Type[T],
        entity_kind: str,
        resource_name: str,
        date_field: str = "created_at",
        created_field: str = "created_at",
    ):
        self.session = session
        self.model = model
        self.entity_kind = entity_kind
        self.resource_name = resource_name
        self.date_field = date_field
        self.created_field = created_field

    def _scoped(self, caller: str, filters: Optional[Mapping[str, Any]] = None, criteria: Iterable[Any] = ()):
        stmt = select(self.model).where(self.model.owner_id == caller)
        for name, value in (filters or {}).items():
            if value is None:
                continue
            stmt = stmt.where(getattr(self.model, name) == value)
        for criterion in criteria:
            stmt = stmt.where(criterion)
        return stmt

    async def _commit(self, action: str, entity_id: Any = None):
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(
                f"{self.resource_name} {action} failed",
                exc_info=True,
                extra={"entity_id": entity_id}
            )
            raise StoreError(f"Could not {action} {self.resource_name.lower()}") from exc

    async def list(
        self,
        caller: str,
        filters: Optional[Mapping[str, Any]] = None,
        criteria: Iterable[Any] = (),
        order_by: Any = None,
    ) -> Sequence[T]:
        """
        List the caller's entities.

        ``filters`` are equality filters by attribute name (``None`` values
        are ignored); ``criteria`` are extra SQL expressions. Results are
        newest first by ``date_field`` unless ``order_by`` is given.
        """
        stmt = self._scoped(caller, filters, criteria)
        if order_by is None:
            order_by = getattr(self.model, self.date_field).desc()
        stmt = stmt.order_by(order_by)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(f"{self.resource_name} list failed", exc_info=True)
            raise StoreError(f"Could not list {self.resource_name.lower()} entries") from exc
        return result.scalars().all()

    async def count(self, caller: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self._scoped(caller, filters).subquery())
        try:
            return int((await self.session.execute(stmt)).scalar_one())
        except SQLAlchemyError as exc:
            logger.error(f"{self.resource_name} count failed", exc_info=True)
            raise StoreError(f"Could not count {self.resource_name.lower()} entries") from exc

    async def get(self, caller: str, entity_id: str) -> T:
        """
        Fetch one entity owned by ``caller``.

        Raises:
            ResourceNotFoundError: when the id does not exist or belongs
                to another owner (same error in both cases)
        """
        stmt = self._scoped(caller).where(self.model.id == entity_id)
        try:
            entity = (await self.session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"{self.resource_name} lookup failed", exc_info=True, extra={"entity_id": entity_id})
            raise StoreError(f"Could not load {self.resource_name.lower()}") from exc

        if entity is None:
            raise ResourceNotFoundError(self.resource_name)
        return entity

    async def create(self, caller: str, payload: Mapping[str, Any], **overrides: Any) -> T:
        """
        Validate and insert a new entity owned by ``caller``.

        ``overrides`` are applied on top of the payload before validation
        (e.g. forcing an initial status). Owner and timestamps are always
        set here, whatever the payload says.
        """
        data: Dict[str, Any] = {k: v for k, v in payload.items() if k not in _PROTECTED_FIELDS}
        data.update(overrides)
        validated = validate(self.entity_kind, data)

        now = utcnow()
        entity = self.model(**validated.model_dump())
        entity.owner_id = caller
        setattr(entity, self.created_field, now)
        if hasattr(self.model, "updated_at"):
            entity.updated_at = now

        self.session.add(entity)
        await self._commit("create")
        await self.session.refresh(entity)
        return entity

    def _snapshot(self, entity: T) -> Dict[str, Any]:
        schema_fields = ENTITY_SCHEMAS[self.entity_kind].model_fields
        return {name: getattr(entity, name) for name in schema_fields}

    async def update(self, caller: str, entity_id: str, partial: Mapping[str, Any]) -> T:
        """
        Apply a partial update to an entity owned by ``caller``.

        Keys absent from ``partial`` are left unchanged; keys present
        (including empty strings) overwrite. The merged entity is
        re-validated as a whole before anything is written.
        """
        entity = await self.get(caller, entity_id)

        changes = {k: v for k, v in partial.items() if k not in _PROTECTED_FIELDS}
        merged = {**self._snapshot(entity), **changes}
        validated = validate(self.entity_kind, merged)

        for name, value in validated.model_dump().items():
            setattr(entity, name, value)
        if hasattr(self.model, "updated_at"):
            entity.updated_at = utcnow()

        await self._commit("update", entity_id)
        await self.session.refresh(entity)
        return entity

    async def delete(self, caller: str, entity_id: str) -> T:
        """Delete an entity owned by ``caller`` and return the removed row."""
        entity = await self.get(caller, entity_id)
        await self.session.delete(entity)
        await self._commit("delete", entity_id)
        return entity
