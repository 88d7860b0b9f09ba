"""Meal Planner - pick recipes, build a shopping list, learn from ratings."""

__version__ = "1.0.0"

from .api import CatalogAPI, CatalogAPIError
from .database import MealStore, Mode, StoreError
from .planner import (
    IncompatibleComponentError,
    MealPlan,
    consolidate_components,
    create_meal_plan,
    make_shopping_list,
    merge_components,
)
from .preference_engine import Rating, score_recipe, select_recipes
from .quantities import ParseError, parse_quantity
from .recipe_parser import Component, Ingredient, Measurement, Recipe, RecipeDecodeError, Unit
from .workflow import WorkflowError, gather, review

__all__ = [
    "CatalogAPI",
    "CatalogAPIError",
    "MealStore",
    "Mode",
    "StoreError",
    "MealPlan",
    "IncompatibleComponentError",
    "consolidate_components",
    "create_meal_plan",
    "make_shopping_list",
    "merge_components",
    "Rating",
    "score_recipe",
    "select_recipes",
    "ParseError",
    "parse_quantity",
    "Recipe",
    "Component",
    "Ingredient",
    "Measurement",
    "Unit",
    "RecipeDecodeError",
    "WorkflowError",
    "gather",
    "review",
]
