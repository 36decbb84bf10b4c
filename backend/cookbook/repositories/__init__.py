"""
Cookbook Services — Repository Layer
======================================

The only code that speaks SQL. Entities in, entities out; "no row" becomes
NotFoundError and driver errors propagate.
"""

from cookbook.repositories.base import Repository, SqlAlchemyRepository
from cookbook.repositories.metadata_repository import (
    CategoryRepository,
    CuisineTypeRepository,
    DifficultyLevelRepository,
    PreparationTimeRepository,
    TagRepository,
)
from cookbook.repositories.recipe_repository import RecipeRepository

__all__ = [
    "CategoryRepository",
    "CuisineTypeRepository",
    "DifficultyLevelRepository",
    "PreparationTimeRepository",
    "RecipeRepository",
    "Repository",
    "SqlAlchemyRepository",
    "TagRepository",
]
