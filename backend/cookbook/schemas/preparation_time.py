"""Preparation time DTOs and conversions. Wire shape: {"id": ..., "duration": 45} (minutes)."""

import uuid
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from cookbook.models.preparation_time import DURATION_MAX, DURATION_MIN, PreparationTime
from cookbook.schemas.common import zero_to_none


class PreparationTimeDTO(BaseModel):
    id: Optional[uuid.UUID] = Field(default=None, description="Preparation time identifier")
    duration: int = Field(
        ge=DURATION_MIN,
        le=DURATION_MAX,
        description="Minutes needed to prepare the recipe",
        examples=[45],
    )


class PreparationTimeUpdateDTO(BaseModel):
    """Partial update body; a duration of 0 keeps the stored value."""

    id: Optional[uuid.UUID] = Field(default=None, description="Ignored; the path ID wins")
    duration: Optional[int] = Field(default=None, ge=DURATION_MIN, le=DURATION_MAX)

    @field_validator("duration", mode="before")
    @classmethod
    def zero_keeps_stored(cls, v: Any) -> Any:
        return zero_to_none(v)


def to_dto(entity: PreparationTime) -> PreparationTimeDTO:
    return PreparationTimeDTO(id=entity.id, duration=entity.duration)


def to_entity(dto: PreparationTimeDTO) -> PreparationTime:
    entity = PreparationTime(duration=dto.duration)
    if dto.id is not None:
        entity.id = dto.id
    return entity


def to_dtos(entities: Iterable[PreparationTime]) -> List[PreparationTimeDTO]:
    return [to_dto(entity) for entity in entities]
