"""Recipe persistence."""

from cookbook.models.recipe import Recipe
from cookbook.repositories.base import SqlAlchemyRepository


class RecipeRepository(SqlAlchemyRepository[Recipe]):
    model = Recipe
    resource = "recipe"
    # Set on create only
    server_owned = ("author_id", "image_name")
