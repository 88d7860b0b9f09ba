"""Blocking input prompts that repeat until a valid value is entered."""

from collections.abc import Callable
from typing import TypeVar

import click

T = TypeVar("T")

DEFAULT_FAILURE_MESSAGE = "Your input could not be converted."


def _read_line(prompt: str) -> str:
    return click.prompt(prompt, default="", show_default=False, prompt_suffix="")


def _echo_error(message: str) -> None:
    click.echo(message, err=True)


def validation_input(
    prompt: str,
    convert: Callable[[str], T],
    message_on_failure: str | None = None,
    *,
    read: Callable[[str], str] = _read_line,
    echo: Callable[[str], None] = _echo_error,
) -> T:
    """
    Prompt until the input converts successfully.

    Args:
        prompt: Text shown before each attempt
        convert: Converts the stripped input, raising ValueError when invalid
        message_on_failure: Shown after an invalid attempt
        read: Reads one line of input for a prompt
        echo: Shows the failure message

    Returns:
        The converted value
    """
    while True:
        raw = read(prompt)
        try:
            return convert(raw.strip())
        except ValueError:
            echo(message_on_failure or DEFAULT_FAILURE_MESSAGE)


def parse_recipe_count(text: str) -> int:
    """Parse a positive number of recipes."""
    count = int(text)
    if count < 1:
        raise ValueError(f"Recipe count must be at least 1, got {count}")
    return count
