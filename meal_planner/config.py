"""Configuration and credential management for Meal Planner."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# App directories
APP_NAME = "meal-planner"
CONFIG_DIR = Path.home() / f".{APP_NAME}"
DEFAULT_DATABASE_FILE = CONFIG_DIR / "database.db"

# Ensure config directory exists
CONFIG_DIR.mkdir(parents=True, exist_ok=True)

# Catalog configuration
API_KEY_ENV = "TASTY_API_KEY"
DATABASE_ENV = "MEAL_PLANNER_DB"
CATALOG_HOST = "tasty.p.rapidapi.com"
CATALOG_BASE_URL = f"https://{CATALOG_HOST}"
CATALOG_PAGE_SIZE = 200
RECIPE_URL_BASE = "https://tasty.co/recipe"


class ConfigurationError(Exception):
    """Exception raised for missing or invalid configuration."""

    pass


def get_api_key() -> str | None:
    """Get the catalog API key from the environment."""
    return os.getenv(API_KEY_ENV) or None


def require_api_key() -> str:
    """
    Get the catalog API key, failing if it is not set.

    Raises:
        ConfigurationError: If the key is missing
    """
    key = get_api_key()
    if key is None:
        raise ConfigurationError(
            f"Please set the {API_KEY_ENV} environment variable to your Tasty API key "
            "and try again. Consider using a .env file."
        )
    return key


def get_database_path() -> Path:
    """Get the database path, honouring the MEAL_PLANNER_DB override."""
    override = os.getenv(DATABASE_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_DATABASE_FILE
