"""Tasty catalog API client for listing recipes."""

import logging
from typing import Any

import httpx

from .config import CATALOG_BASE_URL, CATALOG_HOST, CATALOG_PAGE_SIZE
from .recipe_parser import Recipe, RecipeDecodeError, parse_recipe_list

logger = logging.getLogger(__name__)

RECIPES_LIST_URL = f"{CATALOG_BASE_URL}/recipes/list"


class CatalogAPIError(Exception):
    """Exception raised when the catalog cannot be reached."""

    pass


class CatalogAPI:
    """Client for the recipe catalog."""

    def __init__(self, api_key: str, client: httpx.Client | None = None, timeout: float = 30.0):
        self.api_key = api_key
        self.client = client or httpx.Client(timeout=timeout)
        self.client.headers.update(
            {
                "X-RapidAPI-Key": api_key,
                "X-RapidAPI-Host": CATALOG_HOST,
                "User-Agent": "meal-planner httpx client",
                "Accept": "*/*",
                "Accept-Encoding": "gzip, deflate",
            }
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "CatalogAPI":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CatalogAPIError(f"Failed to fetch recipes: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RecipeDecodeError(f"Catalog response is not valid JSON: {e}") from e

    def get_recipes_list(self, offset: int, size: int = CATALOG_PAGE_SIZE) -> list[Recipe]:
        """
        Fetch a page of recipes.

        Args:
            offset: Number of catalog recipes to skip
            size: Page size

        Returns:
            Recipes in catalog order

        Raises:
            CatalogAPIError: If the request fails or returns a non-2xx status
            RecipeDecodeError: If the response cannot be decoded
        """
        logger.debug("Requesting %d recipes from offset %d", size, offset)
        data = self._get_json(RECIPES_LIST_URL, {"from": offset, "size": size})
        recipes = parse_recipe_list(data)
        logger.info("Fetched %d recipes from offset %d", len(recipes), offset)
        return recipes
