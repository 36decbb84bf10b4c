"""Tag DTOs and DTO <-> entity conversions. Wire shape: {"id": ..., "name": ...}."""

import uuid
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from cookbook.models.tag import NAME_MAX_LENGTH, Tag
from cookbook.schemas.common import zero_to_none


class TagDTO(BaseModel):
    """Public representation of a tag; also the create request body."""

    id: Optional[uuid.UUID] = Field(default=None, description="Tag identifier")
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH, description="Tag name")


class TagUpdateDTO(BaseModel):
    """Partial update body; an absent, null or empty name keeps the stored value."""

    id: Optional[uuid.UUID] = Field(default=None, description="Ignored; the path ID wins")
    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def empty_name_keeps_stored(cls, v: Any) -> Any:
        return zero_to_none(v)


def to_dto(entity: Tag) -> TagDTO:
    return TagDTO(id=entity.id, name=entity.name)


def to_entity(dto: TagDTO) -> Tag:
    entity = Tag(name=dto.name)
    if dto.id is not None:
        entity.id = dto.id
    return entity


def to_dtos(entities: Iterable[Tag]) -> List[TagDTO]:
    return [to_dto(entity) for entity in entities]
