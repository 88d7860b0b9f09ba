"""Shared fixtures for meal-planner tests."""

from types import SimpleNamespace
from typing import Any

import pytest
import respx

from meal_planner.database import MealStore
from meal_planner.recipe_parser import Recipe


def measurement_record(
    measurement_id: int,
    quantity: Any,
    unit: str = "cup",
    abbreviation: str | None = None,
) -> dict[str, Any]:
    """Measurement as returned by the catalog."""
    return {
        "id": measurement_id,
        "quantity": quantity,
        "unit": {
            "name": unit,
            "abbreviation": unit if abbreviation is None else abbreviation,
            "display_singular": unit,
            "system": "imperial",
        },
    }


def component_record(ingredient_id: int, name: str, *measurements: dict) -> dict[str, Any]:
    """Component as returned by the catalog."""
    return {
        "raw_text": name,
        "position": 1,
        "ingredient": {"id": ingredient_id, "display_singular": name, "name": name},
        "measurements": list(measurements),
    }


def recipe_record(
    recipe_id: int,
    *,
    name: str | None = None,
    tags: tuple[int, ...] | list[int] = (),
    components: tuple[dict, ...] | list[dict] = (),
) -> dict[str, Any]:
    """Recipe as returned by the catalog."""
    return {
        "id": recipe_id,
        "name": name or f"Recipe {recipe_id}",
        "slug": f"recipe-{recipe_id}",
        "tags": [{"id": tag_id, "name": f"tag_{tag_id}"} for tag_id in tags],
        "sections": [{"name": None, "components": list(components)}],
    }


class FakeCatalog:
    """In-memory catalog that records its calls."""

    def __init__(self, records: list[dict[str, Any]], *, paginate: bool = True):
        self.records = records
        self.paginate = paginate
        self.calls: list[tuple[int, int]] = []

    def get_recipes_list(self, offset: int, size: int = 200) -> list[Recipe]:
        self.calls.append((offset, size))
        records = self.records[offset : offset + size] if self.paginate else self.records
        return [Recipe.from_dict(record) for record in records]


class FailingCatalog:
    """Catalog whose every request fails."""

    def __init__(self, error: Exception):
        self.error = error

    def get_recipes_list(self, offset: int, size: int = 200) -> list[Recipe]:
        raise self.error


@pytest.fixture
def records():
    """Builders for catalog records."""
    return SimpleNamespace(
        recipe=recipe_record,
        component=component_record,
        measurement=measurement_record,
    )


@pytest.fixture
def make_catalog():
    """Factory for in-memory catalogs."""
    return FakeCatalog


@pytest.fixture
def failing_catalog():
    """Factory for catalogs that always fail."""
    return FailingCatalog


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh database file."""
    return tmp_path / "meals.db"


@pytest.fixture
def store(db_path):
    """A fresh store on a temporary database."""
    meal_store = MealStore(db_path)
    yield meal_store
    meal_store.close()


@pytest.fixture
def make_recipe():
    """Build a Recipe from recipe_record arguments."""

    def _make(recipe_id: int, **kwargs: Any) -> Recipe:
        return Recipe.from_dict(recipe_record(recipe_id, **kwargs))

    return _make


@pytest.fixture
def catalog_records():
    """Ten catalog recipes; recipes 1 and 2 share ingredient 42."""
    records = [
        recipe_record(
            1,
            name="Pancakes",
            tags=(10, 11),
            components=(
                component_record(42, "flour", measurement_record(1, "1", "cup")),
                component_record(43, "milk", measurement_record(2, "1 ½", "cup")),
            ),
        ),
        recipe_record(
            2,
            name="Crepes",
            tags=(10,),
            components=(
                component_record(42, "flour", measurement_record(3, "1", "cup")),
                component_record(44, "salt", measurement_record(4, "0", "pinch")),
            ),
        ),
        recipe_record(
            3,
            name="Omelette",
            tags=(12,),
            components=(component_record(45, "egg", measurement_record(5, "3", "", "")),),
        ),
    ]
    records.extend(
        recipe_record(
            recipe_id,
            tags=(20 + recipe_id,),
            components=(
                component_record(
                    100 + recipe_id, f"item {recipe_id}", measurement_record(recipe_id, "2", "g")
                ),
            ),
        )
        for recipe_id in range(4, 11)
    )
    return records


@pytest.fixture
def catalog_response(catalog_records):
    """Catalog list response body."""
    return {"count": len(catalog_records), "results": catalog_records}
