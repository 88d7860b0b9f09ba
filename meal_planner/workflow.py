"""Gather and review phases of the meal planning workflow.

Gather fetches a page of catalog recipes, picks a batch by tag preference,
writes the shopping list and switches to review. Review asks for a rating of
every recipe in the batch, feeds the ratings into the tag scores and switches
back to gather. The phase is persisted, so each run picks up where the last
committed one stopped.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from .config import CATALOG_PAGE_SIZE
from .database import MealStore, Mode, StoredRecipe
from .export import open_file, write_gather_artifacts
from .planner import MealPlan, create_meal_plan
from .preference_engine import Rating, select_recipes

if TYPE_CHECKING:
    from .api import CatalogAPI

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Exception raised when a phase is run in the wrong mode."""

    pass


@dataclass
class GatherResult:
    """Outcome of a gather phase."""

    plan: MealPlan
    shopping_list_path: Path
    recipes_path: Path
    candidate_count: int
    offset: int


@dataclass
class RecipeReview:
    """A rating given to a pending recipe."""

    recipe: StoredRecipe
    rating: Rating
    tag_count: int


def _require_mode(store: MealStore, expected: Mode) -> None:
    mode = store.get_mode()
    if mode != expected:
        raise WorkflowError(f"Cannot {expected} while in {mode} mode")


def gather(
    store: MealStore,
    catalog: "CatalogAPI",
    count: int,
    output_dir: str | Path,
    *,
    now: datetime | None = None,
    open_files: bool = False,
    page_size: int = CATALOG_PAGE_SIZE,
) -> GatherResult:
    """
    Run the gather phase.

    Args:
        store: Persistent state
        catalog: Catalog client with ``get_recipes_list(offset, size)``
        count: Number of recipes to pick
        output_dir: Directory for the shopping list and recipe files
        now: Timestamp for the exported sections
        open_files: Open the exported files in the default viewer
        page_size: Number of catalog recipes to fetch

    Returns:
        GatherResult with the plan and exported file paths

    Raises:
        WorkflowError: If the store is in review mode
    """
    _require_mode(store, Mode.GATHER)
    if count < 1:
        raise ValueError(f"Recipe count must be at least 1, got {count}")

    offset = store.get_offset()
    fetched = catalog.get_recipes_list(offset, page_size)
    candidates = store.remove_served_recipes(fetched)
    logger.info("%d of %d fetched recipes are new", len(candidates), len(fetched))

    tag_likes = store.get_tag_likes(tag_id for recipe in candidates for tag_id in recipe.tag_ids)
    selected = select_recipes(candidates, count, tag_likes)
    if len(selected) < count:
        logger.warning("Only %d new recipes available, wanted %d", len(selected), count)

    plan = create_meal_plan(selected)
    shopping_list_path, recipes_path = write_gather_artifacts(plan, output_dir, now)

    if open_files:
        open_file(shopping_list_path)
        open_file(recipes_path)

    store.commit_gather(selected, count)

    return GatherResult(
        plan=plan,
        shopping_list_path=shopping_list_path,
        recipes_path=recipes_path,
        candidate_count=len(candidates),
        offset=offset + count,
    )


def review(
    store: MealStore,
    ask_rating: Callable[[StoredRecipe], Rating],
) -> list[RecipeReview]:
    """
    Run the review phase.

    Each rating is committed as soon as it is given, so an interrupted review
    only asks again for the recipes still pending.

    Args:
        store: Persistent state
        ask_rating: Returns the user's rating for a recipe

    Returns:
        The ratings given in this run

    Raises:
        WorkflowError: If the store is in gather mode
    """
    _require_mode(store, Mode.REVIEW)

    reviews = []
    for recipe in store.get_pending_recipes():
        rating = ask_rating(recipe)
        tags = store.get_recipe_tags(recipe.id)
        store.record_rating(recipe.id, [tag.id for tag in tags], rating.value)
        reviews.append(RecipeReview(recipe=recipe, rating=rating, tag_count=len(tags)))

    store.finish_review()
    return reviews
