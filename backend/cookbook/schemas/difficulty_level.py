"""
Difficulty level DTOs and DTO <-> entity conversions.

Wire shape: {"id": ..., "level": 3}. Levels run from 1 to 5; on update a
level of 0 (or an absent / null one) keeps the stored value.
"""

import uuid
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from cookbook.models.difficulty_level import LEVEL_MAX, LEVEL_MIN, DifficultyLevel
from cookbook.schemas.common import zero_to_none


class DifficultyLevelDTO(BaseModel):
    id: Optional[uuid.UUID] = Field(default=None, description="Difficulty level identifier")
    level: int = Field(ge=LEVEL_MIN, le=LEVEL_MAX, description="1 (easy) to 5 (hard)", examples=[3])


class DifficultyLevelUpdateDTO(BaseModel):
    id: Optional[uuid.UUID] = Field(default=None, description="Ignored; the path ID wins")
    level: Optional[int] = Field(default=None, ge=LEVEL_MIN, le=LEVEL_MAX)

    @field_validator("level", mode="before")
    @classmethod
    def zero_keeps_stored(cls, v: Any) -> Any:
        return zero_to_none(v)


def to_dto(entity: DifficultyLevel) -> DifficultyLevelDTO:
    return DifficultyLevelDTO(id=entity.id, level=entity.level)


def to_entity(dto: DifficultyLevelDTO) -> DifficultyLevel:
    entity = DifficultyLevel(level=dto.level)
    if dto.id is not None:
        entity.id = dto.id
    return entity


def to_dtos(entities: Iterable[DifficultyLevel]) -> List[DifficultyLevelDTO]:
    return [to_dto(entity) for entity in entities]
