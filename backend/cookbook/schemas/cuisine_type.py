"""Cuisine type DTOs and DTO <-> entity conversions. Wire shape: {"id": ..., "name": ...}."""

import uuid
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from cookbook.models.cuisine_type import NAME_MAX_LENGTH, CuisineType
from cookbook.schemas.common import zero_to_none


class CuisineTypeDTO(BaseModel):
    id: Optional[uuid.UUID] = Field(default=None, description="Cuisine type identifier")
    name: str = Field(
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Cuisine name",
        examples=["italian"],
    )


class CuisineTypeUpdateDTO(BaseModel):
    id: Optional[uuid.UUID] = Field(default=None, description="Ignored; the path ID wins")
    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def empty_name_keeps_stored(cls, v: Any) -> Any:
        return zero_to_none(v)


def to_dto(entity: CuisineType) -> CuisineTypeDTO:
    return CuisineTypeDTO(id=entity.id, name=entity.name)


def to_entity(dto: CuisineTypeDTO) -> CuisineType:
    entity = CuisineType(name=dto.name)
    if dto.id is not None:
        entity.id = dto.id
    return entity


def to_dtos(entities: Iterable[CuisineType]) -> List[CuisineTypeDTO]:
    return [to_dto(entity) for entity in entities]
