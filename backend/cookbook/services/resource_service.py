"""
Cookbook Services — Resource Service
======================================

What:  Domain logic shared by every resource: DTO ↔ entity conversion,
       the partial-update merge and error translation.
How:   Stateless; constructed per request with a repository and the
       resource definition. Works on DTOs, hands entities to the repository.

Error translation:
    NotFoundError                 → propagated unchanged
    any other failure on a read   → InternalServerError("internal server error")
    any other failure on a write  → InternalServerError(<underlying message>)

Partial update:
    1. Load the stored row by ID (NotFoundError propagates).
    2. Fields absent or null in the request keep their stored value; present
       fields win, including zero and other falsy values.
    3. Server-owned fields always keep their stored value.
    4. The path ID replaces any ID carried by the body.
    Concurrent updates are last-write-wins; there is no version check.
"""

import logging
import uuid
from typing import Generic, List, TypeVar

from pydantic import BaseModel

from cookbook.exceptions import CookbookError, InternalServerError, NotFoundError
from cookbook.repositories.base import Repository
from cookbook.resources import ResourceDefinition

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
DtoT = TypeVar("DtoT", bound=BaseModel)


class ResourceService(Generic[EntityT, DtoT]):
    """CRUD operations for one resource, expressed on DTOs."""

    def __init__(self, repository: Repository[EntityT], definition: ResourceDefinition):
        self.repository = repository
        self.definition = definition

    def _identity(self, resource_id: uuid.UUID) -> EntityT:
        """Entity carrying nothing but its primary key."""
        return self.definition.entity(id=resource_id)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[DtoT]:
        try:
            entities = await self.repository.find_all()
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Listing %s failed: %s", self.definition.plural, e, exc_info=True)
            raise InternalServerError() from e
        return self.definition.to_dtos(entities)

    async def find_single(self, resource_id: uuid.UUID) -> DtoT:
        try:
            entity = await self.repository.find_single(self._identity(resource_id))
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Fetching %s %s failed: %s", self.definition.name, resource_id, e)
            raise InternalServerError() from e
        return self.definition.to_dto(entity)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, dto: DtoT) -> DtoT:
        entity = self.definition.to_entity(dto)
        try:
            created = await self.repository.create(entity)
        except CookbookError:
            raise
        except Exception as e:
            logger.error("Creating %s failed: %s", self.definition.name, e)
            raise InternalServerError(str(e)) from e
        logger.info("Created %s %s", self.definition.name, created.id)
        return self.definition.to_dto(created)

    async def update(self, dto: BaseModel, resource_id: uuid.UUID) -> DtoT:
        try:
            stored = await self.repository.find_single(self._identity(resource_id))
        except CookbookError:
            raise
        except Exception as e:
            logger.error("Loading %s %s for update failed: %s", self.definition.name, resource_id, e)
            raise InternalServerError(str(e)) from e

        changes = dto.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"id", *self.definition.server_owned},
        )
        merged = self.definition.to_dto(stored).model_copy(update=changes)
        merged.id = resource_id

        try:
            updated = await self.repository.update(self.definition.to_entity(merged))
        except CookbookError:
            raise
        except Exception as e:
            logger.error("Updating %s %s failed: %s", self.definition.name, resource_id, e)
            raise InternalServerError(str(e)) from e
        logger.info(
            "Updated %s %s (fields: %s)",
            self.definition.name,
            resource_id,
            ", ".join(changes) or "none",
        )
        return self.definition.to_dto(updated)

    async def delete(self, resource_id: uuid.UUID) -> None:
        # No referential safety checks: recipes referring to a deleted tag or
        # category keep their references.
        try:
            await self.repository.delete(self._identity(resource_id))
        except CookbookError:
            raise
        except Exception as e:
            logger.error("Deleting %s %s failed: %s", self.definition.name, resource_id, e)
            raise InternalServerError(str(e)) from e
        logger.info("Deleted %s %s", self.definition.name, resource_id)
