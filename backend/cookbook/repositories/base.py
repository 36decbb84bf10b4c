"""
Cookbook Services — Generic Repository
========================================

What:  The persistence capability set shared by every resource and its
       async SQLAlchemy implementation.
How:   ``SqlAlchemyRepository`` is parameterised by an ORM model; concrete
       repositories only name the model, the resource and the columns an
       update must never touch.

Contract:
    find_all()        live rows ordered by created_at; none ⇒ NotFoundError
    find_single(e)    live row with e.id; missing ⇒ NotFoundError
    create(e)         insert in its own transaction; returns the stored row
    update(e)         write the non-None mutable columns of e to the live row
                      with e.id; missing ⇒ NotFoundError; returns the new row
    delete(e)         soft delete (deleted_at = now); missing ⇒ NotFoundError

    Driver errors (SQLAlchemyError) are rolled back and re-raised unchanged.
    Every read goes through ``_live()`` so soft-deleted rows never surface.
"""

import logging
from typing import ClassVar, Generic, List, Protocol, Tuple, Type, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cookbook.exceptions import NotFoundError
from cookbook.models.base import utcnow

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")

# Columns an update never writes, whatever the resource
_AUDIT_COLUMNS = ("id", "created_at", "updated_at", "deleted_at")


class Repository(Protocol[EntityT]):
    """Capability set consumed by the service layer."""

    async def find_all(self) -> List[EntityT]: ...

    async def find_single(self, entity: EntityT) -> EntityT: ...

    async def create(self, entity: EntityT) -> EntityT: ...

    async def update(self, entity: EntityT) -> EntityT: ...

    async def delete(self, entity: EntityT) -> None: ...


class SqlAlchemyRepository(Generic[EntityT]):
    """
    Repository backed by one table and one AsyncSession.

    Subclasses set:
        model:            ORM class mixing in AuditMixin
        resource:         singular name used in NotFoundError
        server_owned:     columns only the server writes (never updated)
    """

    model: ClassVar[type]
    resource: ClassVar[str] = "resource"
    server_owned: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Helpers ───────────────────────────────────────────────────────────

    def _live(self) -> Select:
        """SELECT over rows that have not been soft-deleted."""
        return select(self.model).where(self.model.deleted_at.is_(None))

    def _mutable_values(self, entity: EntityT) -> dict:
        """Non-None column values an update is allowed to write."""
        skipped = set(_AUDIT_COLUMNS) | set(self.server_owned)
        values = {}
        for column in self.model.__table__.columns:
            if column.key in skipped:
                continue
            value = getattr(entity, column.key, None)
            if value is not None:
                values[column.key] = value
        return values

    async def _rollback(self, operation: str, exc: SQLAlchemyError) -> None:
        logger.error("%s %s failed: %s", self.resource, operation, exc)
        await self.db.rollback()

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[EntityT]:
        result = await self.db.execute(self._live().order_by(self.model.created_at))
        entities = list(result.scalars().all())
        if not entities:
            raise NotFoundError(resource=self.resource)
        return entities

    async def find_single(self, entity: EntityT) -> EntityT:
        stmt = (
            self._live()
            .where(self.model.id == entity.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        found = result.scalar_one_or_none()
        if found is None:
            raise NotFoundError(resource=self.resource, resource_id=str(entity.id))
        return found

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, entity: EntityT) -> EntityT:
        self.db.add(entity)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self._rollback("create", exc)
            raise
        await self.db.refresh(entity)
        logger.debug("Created %s %s", self.resource, entity.id)
        return entity

    async def update(self, entity: EntityT) -> EntityT:
        values = self._mutable_values(entity)
        stmt = (
            update(self.model)
            .where(self.model.id == entity.id, self.model.deleted_at.is_(None))
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError(resource=self.resource, resource_id=str(entity.id))
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self._rollback("update", exc)
            raise
        logger.debug("Updated %s %s (%s)", self.resource, entity.id, ", ".join(values))
        return await self.find_single(entity)

    async def delete(self, entity: EntityT) -> None:
        now = utcnow()
        stmt = (
            update(self.model)
            .where(self.model.id == entity.id, self.model.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError(resource=self.resource, resource_id=str(entity.id))
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self._rollback("delete", exc)
            raise
        logger.debug("Soft-deleted %s %s", self.resource, entity.id)
