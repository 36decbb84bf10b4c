"""
Cookbook Services — Resource Definitions
==========================================

What:  One ``ResourceDefinition`` per REST resource. The generic service,
       handlers and router read everything resource-specific from here:
       names, URL path, repository, DTO classes, conversion functions and
       which fields the server owns.

Resources:
    RECIPES            /api/v2/recipes           recipe service
    TAGS               /api/v2/tag               metadata service
    CATEGORIES         /api/v2/category          metadata service
    CUISINE_TYPES      /api/v2/cuisine-type      metadata service
    DIFFICULTY_LEVELS  /api/v2/difficulty-level  metadata service
    PREPARATION_TIMES  /api/v2/preparation-time  metadata service
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

from cookbook.repositories import (
    CategoryRepository,
    CuisineTypeRepository,
    DifficultyLevelRepository,
    PreparationTimeRepository,
    RecipeRepository,
    SqlAlchemyRepository,
    TagRepository,
)
from cookbook.schemas import (
    category,
    cuisine_type,
    difficulty_level,
    preparation_time,
    recipe,
    tag,
)

EntityT = TypeVar("EntityT")
DtoT = TypeVar("DtoT", bound=BaseModel)


@dataclass(frozen=True)
class ResourceDefinition(Generic[EntityT, DtoT]):
    """
    Static description of a CRUD resource.

    Attributes:
        name:          singular, used in error messages ("recipe not found")
        plural:        used for empty collections ("no recipes found")
        path:          URL segment under /api/v2
        repository:    repository class, constructed per request
        dto:           public DTO; also the create body
        update_dto:    partial-update body (all fields optional)
        to_dto:        entity → DTO
        to_entity:     DTO → entity
        to_dtos:       entities → DTOs, order preserved
        server_owned:  DTO fields restored from the stored row on update
        owner_field:   DTO field set to the caller's user id on create
    """

    name: str
    plural: str
    path: str
    repository: Type[SqlAlchemyRepository]
    dto: Type[DtoT]
    update_dto: Type[BaseModel]
    to_dto: Callable[[Any], DtoT]
    to_entity: Callable[[Any], Any]
    to_dtos: Callable[[Iterable[Any]], List[DtoT]]
    server_owned: Tuple[str, ...] = ()
    owner_field: Optional[str] = None

    @property
    def entity(self) -> type:
        return self.repository.model


RECIPES = ResourceDefinition(
    name="recipe",
    plural="recipes",
    path="recipes",
    repository=RecipeRepository,
    dto=recipe.RecipeDTO,
    update_dto=recipe.RecipeUpdateDTO,
    to_dto=recipe.to_dto,
    to_entity=recipe.to_entity,
    to_dtos=recipe.to_dtos,
    server_owned=("author", "imagename"),
    owner_field="author",
)

TAGS = ResourceDefinition(
    name="tag",
    plural="tags",
    path="tag",
    repository=TagRepository,
    dto=tag.TagDTO,
    update_dto=tag.TagUpdateDTO,
    to_dto=tag.to_dto,
    to_entity=tag.to_entity,
    to_dtos=tag.to_dtos,
)

CATEGORIES = ResourceDefinition(
    name="category",
    plural="categories",
    path="category",
    repository=CategoryRepository,
    dto=category.CategoryDTO,
    update_dto=category.CategoryUpdateDTO,
    to_dto=category.to_dto,
    to_entity=category.to_entity,
    to_dtos=category.to_dtos,
)

CUISINE_TYPES = ResourceDefinition(
    name="cuisine type",
    plural="cuisine types",
    path="cuisine-type",
    repository=CuisineTypeRepository,
    dto=cuisine_type.CuisineTypeDTO,
    update_dto=cuisine_type.CuisineTypeUpdateDTO,
    to_dto=cuisine_type.to_dto,
    to_entity=cuisine_type.to_entity,
    to_dtos=cuisine_type.to_dtos,
)

DIFFICULTY_LEVELS = ResourceDefinition(
    name="difficulty level",
    plural="difficulty levels",
    path="difficulty-level",
    repository=DifficultyLevelRepository,
    dto=difficulty_level.DifficultyLevelDTO,
    update_dto=difficulty_level.DifficultyLevelUpdateDTO,
    to_dto=difficulty_level.to_dto,
    to_entity=difficulty_level.to_entity,
    to_dtos=difficulty_level.to_dtos,
)

PREPARATION_TIMES = ResourceDefinition(
    name="preparation time",
    plural="preparation times",
    path="preparation-time",
    repository=PreparationTimeRepository,
    dto=preparation_time.PreparationTimeDTO,
    update_dto=preparation_time.PreparationTimeUpdateDTO,
    to_dto=preparation_time.to_dto,
    to_entity=preparation_time.to_entity,
    to_dtos=preparation_time.to_dtos,
)
