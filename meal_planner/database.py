"""Workflow state, recipe history and tag scores with SQLite storage."""

import logging
import sqlite3
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import get_database_path
from .recipe_parser import Recipe

logger = logging.getLogger(__name__)

MAX_LOOKUP_WORKERS = 8


class StoreError(Exception):
    """Exception raised for storage read or write failures."""

    pass


class CorruptStateError(StoreError):
    """Exception raised when persisted state holds an unrecognised value."""

    pass


class Mode(Enum):
    """Workflow phase, stored as an integer."""

    GATHER = 0
    REVIEW = 1

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_stored(cls, value: int) -> "Mode":
        """
        Convert a stored integer to a mode.

        Raises:
            CorruptStateError: If the value is not a known mode
        """
        if isinstance(value, int) and not isinstance(value, bool):
            for mode in cls:
                if mode.value == value:
                    return mode
        raise CorruptStateError(f"workflow_state contains a mode value other than 0 or 1: {value!r}")


@dataclass
class StoredRecipe:
    """A recipe as persisted in the store."""

    id: int
    name: str
    slug: str


@dataclass
class TagScore:
    """A tag and its accumulated likes."""

    id: int
    likes: int


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Get a database connection."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize the database schema and the singleton state row."""
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS tags (
            id INTEGER PRIMARY KEY,
            likes INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS recipes (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT NOT NULL DEFAULT ''
        );

        CREATE TABLE IF NOT EXISTS recipe_tags (
            recipe_id INTEGER NOT NULL,
            tag_id INTEGER NOT NULL,
            PRIMARY KEY (recipe_id, tag_id),
            FOREIGN KEY (recipe_id) REFERENCES recipes(id),
            FOREIGN KEY (tag_id) REFERENCES tags(id)
        );

        CREATE TABLE IF NOT EXISTS recipe_history (
            recipe_id INTEGER PRIMARY KEY,
            FOREIGN KEY (recipe_id) REFERENCES recipes(id)
        );

        CREATE TABLE IF NOT EXISTS pending_recipes (
            recipe_id INTEGER NOT NULL UNIQUE,
            FOREIGN KEY (recipe_id) REFERENCES recipes(id)
        );

        CREATE TABLE IF NOT EXISTS workflow_state (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            mode INTEGER NOT NULL DEFAULT 0,
            "offset" INTEGER NOT NULL DEFAULT 0
        );

        INSERT OR IGNORE INTO workflow_state (id, mode, "offset") VALUES (1, 0, 0);
    """)
    conn.commit()


class MealStore:
    """Persist workflow state, served recipes and tag scores."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or get_database_path()
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            conn = None
            try:
                conn = get_connection(self.db_path)
                init_db(conn)
            except sqlite3.Error as e:
                if conn is not None:
                    conn.close()
                raise StoreError(f"Failed to open database {self.db_path}: {e}") from e
            self._conn = conn
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "MealStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _fetch_one(self, query: str, params: tuple = ()) -> sqlite3.Row | None:
        try:
            return self.conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Database read failed: {e}") from e

    def _fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Database read failed: {e}") from e

    # ------------------------------------------------------------------
    # Workflow state
    # ------------------------------------------------------------------

    def get_mode(self) -> Mode:
        """Get the current workflow phase."""
        row = self._fetch_one("SELECT mode FROM workflow_state WHERE id = 1")
        if row is None:
            raise CorruptStateError("workflow_state has no row")
        return Mode.from_stored(row["mode"])

    def get_offset(self) -> int:
        """Get the number of catalog recipes consumed so far."""
        row = self._fetch_one('SELECT "offset" FROM workflow_state WHERE id = 1')
        if row is None:
            raise CorruptStateError("workflow_state has no row")
        return row["offset"]

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------

    def recipe_exists(self, recipe_id: int) -> bool:
        """Check if a recipe has been served before."""
        row = self._fetch_one(
            "SELECT 1 FROM recipe_history WHERE recipe_id = ? LIMIT 1", (recipe_id,)
        )
        return row is not None

    def remove_served_recipes(self, recipes: list[Recipe]) -> list[Recipe]:
        """Drop recipes that are already in the history, keeping order."""
        return [recipe for recipe in recipes if not self.recipe_exists(recipe.id)]

    def get_pending_recipes(self) -> list[StoredRecipe]:
        """Get the recipes waiting for a rating."""
        rows = self._fetch_all(
            """
            SELECT recipes.id, recipes.name, recipes.slug
            FROM recipes
            INNER JOIN pending_recipes ON recipes.id = pending_recipes.recipe_id
            ORDER BY pending_recipes.rowid
            """
        )
        return [StoredRecipe(id=row["id"], name=row["name"], slug=row["slug"]) for row in rows]

    def count_history(self) -> int:
        """Get the number of recipes ever served."""
        row = self._fetch_one("SELECT COUNT(*) AS count FROM recipe_history")
        return row["count"] if row else 0

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def _lookup_likes(self, tag_id: int) -> int:
        """Read one tag's likes on a dedicated connection."""
        try:
            with closing(get_connection(self.db_path)) as conn:
                row = conn.execute("SELECT likes FROM tags WHERE id = ?", (tag_id,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read tag {tag_id}: {e}") from e
        return row["likes"] if row else 0

    def get_tag_likes(self, tag_ids: Iterable[int]) -> dict[int, int]:
        """
        Get the likes of several tags, looked up concurrently.

        Tags that were never stored score 0. Any failed lookup fails the
        whole call.
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return {}

        # Workers open their own connections, so the schema must exist first
        self._fetch_one("SELECT 1")

        workers = min(len(unique_ids), MAX_LOOKUP_WORKERS)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            likes = list(executor.map(self._lookup_likes, unique_ids))

        logger.debug("Looked up likes for %d tags", len(unique_ids))
        return dict(zip(unique_ids, likes))

    def get_recipe_tags(self, recipe_id: int) -> list[TagScore]:
        """Get a stored recipe's tags with their current likes."""
        rows = self._fetch_all(
            "SELECT tag_id FROM recipe_tags WHERE recipe_id = ? ORDER BY rowid", (recipe_id,)
        )
        likes = self.get_tag_likes(row["tag_id"] for row in rows)
        return [TagScore(id=tag_id, likes=value) for tag_id, value in likes.items()]

    def get_top_tags(self, limit: int = 10) -> list[TagScore]:
        """Get the tags with the highest likes."""
        rows = self._fetch_all(
            "SELECT id, likes FROM tags ORDER BY likes DESC, id ASC LIMIT ?", (limit,)
        )
        return [TagScore(id=row["id"], likes=row["likes"]) for row in rows]

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def commit_gather(self, recipes: list[Recipe], count: int) -> None:
        """
        Record a gathered batch and switch to review.

        Stores the recipes and their tags, adds them to the history and the
        pending batch, advances the offset by ``count`` and sets the mode to
        review, all in one transaction.
        """
        try:
            with self.conn:
                for recipe in recipes:
                    self.conn.execute(
                        "INSERT OR IGNORE INTO recipes (id, name, slug) VALUES (?, ?, ?)",
                        (recipe.id, recipe.name, recipe.slug),
                    )
                    for tag_id in recipe.tag_ids:
                        self.conn.execute(
                            "INSERT OR IGNORE INTO tags (id, likes) VALUES (?, 0)", (tag_id,)
                        )
                        self.conn.execute(
                            "INSERT OR IGNORE INTO recipe_tags (recipe_id, tag_id) VALUES (?, ?)",
                            (recipe.id, tag_id),
                        )
                    self.conn.execute(
                        "INSERT OR IGNORE INTO recipe_history (recipe_id) VALUES (?)",
                        (recipe.id,),
                    )
                    self.conn.execute(
                        "INSERT OR IGNORE INTO pending_recipes (recipe_id) VALUES (?)",
                        (recipe.id,),
                    )
                self.conn.execute(
                    'UPDATE workflow_state SET "offset" = "offset" + ?, mode = ? WHERE id = 1',
                    (count, Mode.REVIEW.value),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to save gathered recipes: {e}") from e

        logger.info("Stored %d recipes, offset advanced by %d", len(recipes), count)

    def record_rating(self, recipe_id: int, tag_ids: list[int], value: int) -> None:
        """Add a rating value to each tag and remove the recipe from the pending batch."""
        try:
            with self.conn:
                for tag_id in tag_ids:
                    self.conn.execute(
                        "UPDATE tags SET likes = likes + ? WHERE id = ?", (value, tag_id)
                    )
                self.conn.execute("DELETE FROM pending_recipes WHERE recipe_id = ?", (recipe_id,))
        except sqlite3.Error as e:
            raise StoreError(f"Failed to record rating for recipe {recipe_id}: {e}") from e

        logger.debug("Applied %+d to %d tags of recipe %d", value, len(tag_ids), recipe_id)

    def finish_review(self) -> None:
        """Clear the pending batch and switch back to gathering."""
        try:
            with self.conn:
                self.conn.execute("DELETE FROM pending_recipes")
                self.conn.execute(
                    "UPDATE workflow_state SET mode = ? WHERE id = 1", (Mode.GATHER.value,)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to finish review: {e}") from e

        logger.info("Review finished, back to gathering")
