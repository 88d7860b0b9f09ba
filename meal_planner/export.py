"""Shopping list and recipe link export to dated text files."""

import logging
from datetime import datetime
from pathlib import Path

import click

from .config import RECIPE_URL_BASE
from .planner import MealPlan
from .recipe_parser import Recipe

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Exception raised when an export file cannot be written."""

    pass


def recipe_url(slug: str) -> str:
    """Build the public URL of a recipe from its slug."""
    return f"{RECIPE_URL_BASE}/{slug}"


def format_recipe_links(recipes: list[Recipe]) -> str:
    """One recipe URL per line."""
    return "\n".join(recipe_url(recipe.slug) for recipe in recipes)


def format_time(now: datetime) -> str:
    """Format a time like ``07:45 pm``."""
    return now.strftime("%I:%M ") + ("am" if now.hour < 12 else "pm")


def format_section(body: str, now: datetime) -> str:
    """
    Format a timestamped section.

    The time is underlined with one dash per character and the section ends
    with a blank line.
    """
    time = format_time(now)
    return f"{time}\n{'-' * len(time)}\n{body}\n\n"


def append_section(filepath: str | Path, body: str, now: datetime) -> None:
    """
    Append a timestamped section to a file, creating it if needed.

    Raises:
        ExportError: If the file cannot be written
    """
    try:
        with open(filepath, "a", encoding="utf-8") as f:
            f.write(format_section(body, now))
    except OSError as e:
        raise ExportError(f"Failed to write {filepath}: {e}") from e

    logger.debug("Appended section to %s", filepath)


def write_gather_artifacts(
    plan: MealPlan,
    output_dir: str | Path,
    now: datetime | None = None,
) -> tuple[Path, Path]:
    """
    Append the shopping list and recipe links to today's files.

    Args:
        plan: The gathered meal plan
        output_dir: Directory holding the dated files
        now: Timestamp for the section header

    Returns:
        Tuple of (shopping_list_path, recipes_path)
    """
    now = now or datetime.now()
    output_dir = Path(output_dir)
    today = now.date().isoformat()

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Failed to create {output_dir}: {e}") from e

    shopping_list_path = output_dir / f"shopping-list-{today}.txt"
    recipes_path = output_dir / f"recipes-{today}.txt"

    append_section(shopping_list_path, plan.shopping_list, now)
    append_section(recipes_path, format_recipe_links(plan.recipes), now)

    logger.info("Wrote %s and %s", shopping_list_path, recipes_path)
    return shopping_list_path, recipes_path


def open_file(filepath: str | Path) -> None:
    """Open a file in the system's default viewer."""
    click.launch(str(filepath))
