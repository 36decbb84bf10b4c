"""
Cookbook Services — Recipe Schemas and Conversions
====================================================

What:  Wire (DTO) forms of a recipe and the free functions converting
       between DTOs and the ORM entity.

Wire shape:
    {
        "id": "6f1c…",
        "name": "apple pie",
        "description": "pie with apples",
        "servingcount": 4,
        "author": "9b2e…",
        "imagename": "6a0d…"
    }

Conversion rules:
    - to_dto / to_entity are total and loss-free on the shared fields.
    - Audit columns (created_at, updated_at, deleted_at) never reach a DTO.
    - to_entity leaves ``id`` unset when the DTO has none, so the database
      layer generates it.
"""

import uuid
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from cookbook.models.recipe import DESCRIPTION_MAX_BYTES, Recipe
from cookbook.schemas.common import zero_to_none


def _check_description_size(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > DESCRIPTION_MAX_BYTES:
        raise ValueError(f"description must be at most {DESCRIPTION_MAX_BYTES} bytes")
    return value


# ══════════════════════════════════════════════════════════════════════════
# DTOs
# ══════════════════════════════════════════════════════════════════════════


class RecipeDTO(BaseModel):
    """
    Public representation of a recipe; also the create request body.

    ``id`` is optional because a create body must not carry one; every
    response carries it. ``author`` and ``imagename`` are server-owned:
    values sent by a client are replaced before persistence.
    """

    id: Optional[uuid.UUID] = Field(default=None, description="Recipe identifier")
    name: str = Field(min_length=1, description="Recipe title", examples=["apple pie"])
    description: str = Field(
        min_length=1,
        description="Free-text description (max 65535 bytes)",
        examples=["pie with apples"],
    )
    servingcount: int = Field(default=0, ge=0, description="Number of servings", examples=[4])
    author: Optional[str] = Field(default=None, description="Subject of the creating user")
    imagename: Optional[str] = Field(default=None, description="Image store object name")

    @field_validator("description")
    @classmethod
    def validate_description_size(cls, v: str) -> str:
        return _check_description_size(v)


class RecipeUpdateDTO(BaseModel):
    """
    Partial update body. Every field is optional.

    A field that is absent or null keeps the stored value, and so does an
    empty ``name`` or ``description``. Any other present value replaces the
    stored one, including ``"servingcount": 0``.
    """

    id: Optional[uuid.UUID] = Field(default=None, description="Ignored; the path ID wins")
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    servingcount: Optional[int] = Field(default=None, ge=0)
    author: Optional[str] = Field(default=None, description="Ignored; server-owned")
    imagename: Optional[str] = Field(default=None, description="Ignored; server-owned")

    @field_validator("name", "description", mode="before")
    @classmethod
    def empty_text_keeps_stored(cls, v: Any) -> Any:
        return zero_to_none(v)

    @field_validator("description")
    @classmethod
    def validate_description_size(cls, v: Optional[str]) -> Optional[str]:
        return _check_description_size(v)


# ══════════════════════════════════════════════════════════════════════════
# Conversions
# ══════════════════════════════════════════════════════════════════════════


def to_dto(entity: Recipe) -> RecipeDTO:
    return RecipeDTO(
        id=entity.id,
        name=entity.name,
        description=entity.description,
        servingcount=entity.serving_count or 0,
        author=entity.author_id,
        imagename=entity.image_name,
    )


def to_entity(dto: RecipeDTO) -> Recipe:
    entity = Recipe(
        name=dto.name,
        description=dto.description,
        serving_count=dto.servingcount,
        author_id=dto.author,
        image_name=dto.imagename,
    )
    if dto.id is not None:
        entity.id = dto.id
    return entity


def to_dtos(entities: Iterable[Recipe]) -> List[RecipeDTO]:
    return [to_dto(entity) for entity in entities]
