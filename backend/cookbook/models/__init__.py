"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from cookbook.models.category import Category
from cookbook.models.cuisine_type import CuisineType
from cookbook.models.difficulty_level import DifficultyLevel
from cookbook.models.preparation_time import PreparationTime
from cookbook.models.recipe import Recipe
from cookbook.models.tag import Tag

__all__ = [
    "Category",
    "CuisineType",
    "DifficultyLevel",
    "PreparationTime",
    "Recipe",
    "Tag",
]
