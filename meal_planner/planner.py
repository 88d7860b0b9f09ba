"""Meal planning: consolidate recipe components into a shopping list."""

from dataclasses import dataclass, field

from .recipe_parser import Component, Measurement, Recipe


class IncompatibleComponentError(Exception):
    """Exception raised when merging components of different ingredients."""

    def __init__(self, left_id: int, right_id: int):
        self.left_id = left_id
        self.right_id = right_id
        super().__init__(
            "Components must have the same ingredients in order to add their amounts "
            f"(got {left_id} and {right_id})."
        )


@dataclass
class MealPlan:
    """A batch of recipes with their consolidated components."""

    recipes: list[Recipe]
    components: list[Component] = field(default_factory=list)

    @property
    def recipe_count(self) -> int:
        return len(self.recipes)

    @property
    def ingredient_count(self) -> int:
        return len(self.components)

    @property
    def shopping_list(self) -> str:
        return make_shopping_list(self.components)


def get_components(recipes: list[Recipe]) -> list[Component]:
    """Flatten components in recipe, then section, then component order."""
    return [
        component
        for recipe in recipes
        for section in recipe.sections
        for component in section.components
    ]


def merge_components(left: Component, right: Component) -> Component:
    """
    Merge two components of the same ingredient.

    Every pair of measurements sharing a unit name yields one measurement with
    the summed quantity and the left measurement's id and unit. Pairs with
    different units are dropped.

    Raises:
        IncompatibleComponentError: If the ingredients differ
    """
    if left.ingredient.id != right.ingredient.id:
        raise IncompatibleComponentError(left.ingredient.id, right.ingredient.id)

    measurements = [
        Measurement(
            id=measurement.id,
            quantity=measurement.quantity + other.quantity,
            unit=measurement.unit,
        )
        for measurement in left.measurements
        for other in right.measurements
        if measurement.unit.name == other.unit.name
    ]
    return Component(ingredient=left.ingredient, measurements=measurements)


def consolidate_components(components: list[Component]) -> list[Component]:
    """
    Consolidate components so each ingredient appears once.

    Later occurrences are merged into the first, and ingredients keep the
    order in which they first appeared.
    """
    positions: dict[int, int] = {}
    consolidated: list[Component] = []

    for component in components:
        index = positions.get(component.ingredient.id)
        if index is None:
            positions[component.ingredient.id] = len(consolidated)
            consolidated.append(component)
        else:
            consolidated[index] = merge_components(consolidated[index], component)

    return consolidated


def format_quantity(quantity: float) -> str:
    """Format a quantity as an integer when whole, otherwise with two decimals."""
    if quantity == int(quantity):
        return str(int(quantity))
    return f"{quantity:.2f}"


def format_component(component: Component) -> str:
    """
    Format a consolidated component as one shopping list line.

    Only the first measurement is shown. Components without a measured
    amount show just the ingredient name.
    """
    name = component.ingredient.display_singular
    if all(m.quantity == 0 for m in component.measurements):
        return name

    measurement = component.measurements[0]
    return f"{name}: {format_quantity(measurement.quantity)} {measurement.unit.abbreviation}"


def make_shopping_list(components: list[Component]) -> str:
    """Render consolidated components as newline-separated lines."""
    return "\n".join(format_component(component) for component in components)


def create_meal_plan(recipes: list[Recipe]) -> MealPlan:
    """
    Create a meal plan from selected recipes.

    Args:
        recipes: Recipes in the order they were selected

    Returns:
        MealPlan with consolidated components
    """
    return MealPlan(
        recipes=recipes,
        components=consolidate_components(get_components(recipes)),
    )
