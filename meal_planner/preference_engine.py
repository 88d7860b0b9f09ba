"""Tag preference scoring and recipe selection.

Every tag carries an additive ``likes`` score. Reviewing a recipe adds the
rating value to each of its tags, and new batches favour recipes whose tags
have accumulated the highest scores.
"""

from collections.abc import Mapping
from enum import Enum

from .recipe_parser import Recipe

RATING_ERROR_MESSAGE = "Please enter dislike, none, like, or love."


class Rating(Enum):
    """How much the user liked a recipe, with its score adjustment."""

    DISLIKE = -1
    NONE = 0
    LIKE = 1
    LOVE = 2

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> "Rating":
        """
        Parse a rating name, ignoring case.

        Raises:
            ValueError: If the text is not one of the rating names
        """
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(RATING_ERROR_MESSAGE) from None


def score_recipe(recipe: Recipe, tag_likes: Mapping[int, int]) -> int:
    """Sum the likes of a recipe's tags. Unknown tags score 0."""
    return sum(tag_likes.get(tag.id, 0) for tag in recipe.tags)


def select_recipes(
    candidates: list[Recipe],
    count: int,
    tag_likes: Mapping[int, int],
) -> list[Recipe]:
    """
    Pick the highest-scoring recipes.

    Args:
        candidates: Recipes not served before, in catalog order
        count: Number of recipes wanted
        tag_likes: Tag id -> accumulated likes

    Returns:
        Up to ``count`` recipes in descending score order. Among equal
        scores, later catalog entries come first.
    """
    if count < 1:
        raise ValueError(f"Recipe count must be at least 1, got {count}")

    # Ascending stable sort, then reverse: ties come out in reverse input order
    ranked = sorted(candidates, key=lambda recipe: score_recipe(recipe, tag_likes))
    return list(reversed(ranked))[:count]
