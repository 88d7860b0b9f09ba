"""Tests for the catalog API client."""

import httpx
import pytest

from meal_planner.api import RECIPES_LIST_URL, CatalogAPI, CatalogAPIError
from meal_planner.config import CATALOG_HOST
from meal_planner.recipe_parser import RecipeDecodeError


@pytest.fixture
def api_client():
    """Create a CatalogAPI client with a test key."""
    client = CatalogAPI("test-key-123")
    yield client
    client.close()


class TestGetRecipesList:
    """Tests for CatalogAPI.get_recipes_list."""

    def test_returns_recipes(self, mock_httpx, api_client, catalog_response):
        mock_httpx.get(RECIPES_LIST_URL).respond(json=catalog_response)

        recipes = api_client.get_recipes_list(0, 200)

        assert len(recipes) == 10
        assert recipes[0].name == "Pancakes"
        assert recipes[0].sections[0].components[1].measurements[0].quantity == 1.5

    def test_sends_pagination_params(self, mock_httpx, api_client):
        route = mock_httpx.get(RECIPES_LIST_URL).respond(json={"count": 0, "results": []})

        api_client.get_recipes_list(40, 20)

        request = route.calls.last.request
        assert request.url.params["from"] == "40"
        assert request.url.params["size"] == "20"

    def test_sends_credentials(self, mock_httpx, api_client):
        route = mock_httpx.get(RECIPES_LIST_URL).respond(json={"count": 0, "results": []})

        api_client.get_recipes_list(0)

        request = route.calls.last.request
        assert request.headers["X-RapidAPI-Key"] == "test-key-123"
        assert request.headers["X-RapidAPI-Host"] == CATALOG_HOST
        assert request.url.params["size"] == "200"

    def test_http_error(self, mock_httpx, api_client):
        mock_httpx.get(RECIPES_LIST_URL).respond(status_code=403, json={"message": "Forbidden"})

        with pytest.raises(CatalogAPIError):
            api_client.get_recipes_list(0)

    def test_network_error(self, mock_httpx, api_client):
        mock_httpx.get(RECIPES_LIST_URL).mock(
            side_effect=httpx.ConnectError("Network unreachable")
        )

        with pytest.raises(CatalogAPIError) as exc_info:
            api_client.get_recipes_list(0)
        assert "Network unreachable" in str(exc_info.value)

    def test_invalid_json(self, mock_httpx, api_client):
        mock_httpx.get(RECIPES_LIST_URL).respond(text="<html>oops</html>")

        with pytest.raises(RecipeDecodeError):
            api_client.get_recipes_list(0)

    def test_unexpected_shape(self, mock_httpx, api_client):
        mock_httpx.get(RECIPES_LIST_URL).respond(json={"error": "nope"})

        with pytest.raises(RecipeDecodeError):
            api_client.get_recipes_list(0)


class TestClient:
    """Tests for client construction."""

    def test_uses_given_client(self):
        client = httpx.Client()

        with CatalogAPI("key", client=client) as api:
            assert api.client is client
            assert client.headers["X-RapidAPI-Key"] == "key"

        assert client.is_closed
