from .recipe_service import RecipeService

__all__ = ["RecipeService"]
