"""Persistence for the metadata service's resources."""

from cookbook.models import Category, CuisineType, DifficultyLevel, PreparationTime, Tag
from cookbook.repositories.base import SqlAlchemyRepository


class TagRepository(SqlAlchemyRepository[Tag]):
    model = Tag
    resource = "tag"


class CategoryRepository(SqlAlchemyRepository[Category]):
    model = Category
    resource = "category"


class CuisineTypeRepository(SqlAlchemyRepository[CuisineType]):
    model = CuisineType
    resource = "cuisine type"


class DifficultyLevelRepository(SqlAlchemyRepository[DifficultyLevel]):
    model = DifficultyLevel
    resource = "difficulty level"


class PreparationTimeRepository(SqlAlchemyRepository[PreparationTime]):
    model = PreparationTime
    resource = "preparation time"
