"""Catalog recipe records and payload decoding."""

from dataclasses import dataclass, field
from typing import Any

from .quantities import ParseError, parse_quantity


class RecipeDecodeError(Exception):
    """Exception raised when a catalog payload does not match the expected shape."""

    pass


@dataclass
class Unit:
    """A measurement unit. Units are compatible only if their names match."""

    name: str
    abbreviation: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Unit":
        return cls(name=data["name"], abbreviation=data.get("abbreviation") or "")


@dataclass
class Measurement:
    """A quantity of an ingredient in one unit."""

    id: int
    quantity: float
    unit: Unit

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Measurement":
        raw = data["quantity"]
        if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
            raise RecipeDecodeError(f"Unexpected quantity value: {raw!r}")
        quantity = float(raw) if isinstance(raw, (int, float)) else parse_quantity(raw)
        return cls(
            id=int(data["id"]),
            quantity=quantity,
            unit=Unit.from_dict(data["unit"]),
        )


@dataclass
class Ingredient:
    """A catalog ingredient, identified by its id."""

    id: int
    display_singular: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ingredient":
        return cls(id=int(data["id"]), display_singular=data["display_singular"])


@dataclass
class Component:
    """An ingredient together with its stated measurements within one recipe."""

    ingredient: Ingredient
    measurements: list[Measurement] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Component":
        return cls(
            ingredient=Ingredient.from_dict(data["ingredient"]),
            measurements=[Measurement.from_dict(m) for m in data["measurements"]],
        )


@dataclass
class Section:
    """A named group of components in a recipe."""

    components: list[Component] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Section":
        return cls(components=[Component.from_dict(c) for c in data["components"]])


@dataclass
class Tag:
    """A catalog tag reference."""

    id: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tag":
        return cls(id=int(data["id"]))


@dataclass
class Recipe:
    """A recipe record from the catalog."""

    id: int
    name: str
    slug: str
    tags: list[Tag] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)

    @property
    def tag_ids(self) -> list[int]:
        return [tag.id for tag in self.tags]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        """Create recipe from a catalog record."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            slug=data["slug"],
            tags=[Tag.from_dict(t) for t in data["tags"]],
            sections=[Section.from_dict(s) for s in data["sections"]],
        )


def parse_recipe_list(payload: Any) -> list[Recipe]:
    """
    Decode a catalog list response into recipes.

    Args:
        payload: Decoded JSON body with a ``results`` list

    Returns:
        Recipes in catalog order

    Raises:
        RecipeDecodeError: If the payload or any quantity is malformed
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise RecipeDecodeError("Catalog response has no 'results' list")

    recipes = []
    for record in payload["results"]:
        try:
            recipes.append(Recipe.from_dict(record))
        except ParseError as e:
            raise RecipeDecodeError(f"Failed to parse quantity {e.text!r}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise RecipeDecodeError(f"Malformed recipe record: {e!r}") from e
    return recipes
