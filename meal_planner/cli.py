"""CLI entry point for Meal Planner."""

import logging
from pathlib import Path

import click

from .api import CatalogAPI, CatalogAPIError
from .config import ConfigurationError, get_database_path, require_api_key
from .database import MealStore, Mode, StoredRecipe, StoreError
from .export import ExportError, format_recipe_links
from .planner import IncompatibleComponentError
from .preference_engine import RATING_ERROR_MESSAGE, Rating
from .prompts import parse_recipe_count, validation_input
from .recipe_parser import RecipeDecodeError
from .workflow import GatherResult, WorkflowError, gather, review

# Errors that end a run without changing the stored phase
RUN_ERRORS = (
    CatalogAPIError,
    RecipeDecodeError,
    StoreError,
    ConfigurationError,
    IncompatibleComponentError,
    ExportError,
    WorkflowError,
)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_store(ctx: click.Context) -> MealStore:
    """Get the store selected on the command line, opening it once."""
    root = ctx.find_root()
    if "store" not in root.obj:
        store = MealStore(root.obj["db_path"])
        root.call_on_close(store.close)
        root.obj["store"] = store
    return root.obj["store"]


def prompt_recipe_count() -> int:
    return validation_input(
        "How many recipes do you want? ",
        parse_recipe_count,
        "Please enter a whole number of recipes (1 or more).",
    )


def prompt_rating(recipe: StoredRecipe) -> Rating:
    return validation_input(
        f"How did you like {recipe.name} (dislike, none, like, or love)? ",
        Rating.parse,
        RATING_ERROR_MESSAGE,
    )


def display_gather_result(result: GatherResult) -> None:
    """Display the shopping list and recipe links of a gathered batch."""
    click.echo()
    click.echo("=" * 60)
    click.echo("SHOPPING LIST")
    click.echo("=" * 60)
    click.echo(result.plan.shopping_list)
    click.echo()
    click.echo("=" * 60)
    click.echo("RECIPES")
    click.echo("=" * 60)
    click.echo(format_recipe_links(result.plan.recipes))
    click.echo()
    click.echo("-" * 60)
    click.echo(
        f"Recipes: {result.plan.recipe_count} | Ingredients: {result.plan.ingredient_count}"
    )
    click.echo(f"✓ Shopping list saved to {result.shopping_list_path}")
    click.echo(f"✓ Recipe links saved to {result.recipes_path}")
    click.echo("-" * 60)


def run_gather(
    ctx: click.Context, count: int | None, output_dir: Path, open_files: bool
) -> None:
    store = get_store(ctx)
    # Check the phase before asking for a count or a key
    if store.get_mode() != Mode.GATHER:
        raise WorkflowError("Cannot gather while in review mode. Run: meal-planner review")

    api_key = require_api_key()
    if count is None:
        count = prompt_recipe_count()

    click.echo("Searching recipes...")
    with CatalogAPI(api_key) as catalog:
        result = gather(store, catalog, count, output_dir, open_files=open_files)

    display_gather_result(result)
    click.echo("✓ Done! Run meal-planner again after cooking to rate these recipes.")


def run_review(ctx: click.Context) -> None:
    store = get_store(ctx)
    reviews = review(store, prompt_rating)

    for item in reviews:
        click.echo(f"  {item.recipe.name}: {item.rating} ({item.tag_count} tags)")
    click.echo(f"✓ Reviewed {len(reviews)} recipe(s). Ready to gather a new batch.")


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version="1.0.0", prog_name="meal-planner")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Database file (default: ~/.meal-planner/database.db)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, db_path: Path | None, verbose: bool):
    """Meal planning assistant.

    Picks a batch of recipes from the Tasty catalog, writes a combined
    shopping list, and learns from your ratings which recipes to pick next.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path or get_database_path()


def gather_options(func):
    """Options shared by the run and gather commands."""
    func = click.option(
        "--no-open", "no_open", is_flag=True, help="Don't open the written files"
    )(func)
    func = click.option(
        "--output-dir",
        "-o",
        type=click.Path(file_okay=False, path_type=Path),
        default=Path("."),
        show_default=True,
        help="Directory for the shopping list and recipe files",
    )(func)
    func = click.option(
        "--count", "-n", type=click.IntRange(min=1), help="Number of recipes to pick"
    )(func)
    return func


# ============================================================================
# Workflow Commands
# ============================================================================


@cli.command()
@gather_options
@click.pass_context
def run(ctx: click.Context, count: int | None, output_dir: Path, no_open: bool):
    """Run the next phase: gather a new batch or review the last one."""
    try:
        if get_store(ctx).get_mode() == Mode.GATHER:
            run_gather(ctx, count, output_dir, not no_open)
        else:
            run_review(ctx)
    except RUN_ERRORS as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None


@cli.command("gather")
@gather_options
@click.pass_context
def gather_cmd(ctx: click.Context, count: int | None, output_dir: Path, no_open: bool):
    """Pick new recipes and write their shopping list.

    Examples:

    \b
        meal-planner gather --count 3
        meal-planner gather -n 5 --output-dir ~/lists --no-open
    """
    try:
        run_gather(ctx, count, output_dir, not no_open)
    except RUN_ERRORS as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None


@cli.command("review")
@click.pass_context
def review_cmd(ctx: click.Context):
    """Rate the recipes from the last batch."""
    try:
        run_review(ctx)
    except RUN_ERRORS as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None


# ============================================================================
# Inspection Commands
# ============================================================================


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Show the current phase and batch."""
    try:
        store = get_store(ctx)
        mode = store.get_mode()
        offset = store.get_offset()
        pending = store.get_pending_recipes()
        served = store.count_history()
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"Mode: {mode}")
    click.echo(f"Catalog offset: {offset}")
    click.echo(f"Recipes served: {served}")
    if pending:
        click.echo(f"Waiting for a rating ({len(pending)}):")
        for recipe in pending:
            click.echo(f"  - {recipe.name}")


@cli.command()
@click.option("--limit", "-l", type=click.IntRange(min=1), default=10, show_default=True)
@click.pass_context
def tags(ctx: click.Context, limit: int):
    """Show the best-liked tags."""
    try:
        top = get_store(ctx).get_top_tags(limit)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if not top:
        click.echo("No tags scored yet.")
        return

    for tag in top:
        click.echo(f"  {tag.id}: {tag.likes:+d}")


def main():
    cli()


if __name__ == "__main__":
    main()
