"""Library for formatting command output."""

from abc import ABC, abstractmethod
import json
import sys
from typing import Any, TextIO

import yaml

PADDING = 4


def format_columns(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Return the rows aligned into columns sized by the widest value."""
    data = [headers] + rows
    widths = [max(len(row[i]) for row in data) for i in range(len(headers))]
    format_string = "".join([f"{{:{w + PADDING}}}" for w in widths])
    return [format_string.format(*row).rstrip() for row in data]


class PrintFormatter:
    """A formatter that prints human readable console output."""

    def __init__(self, keys: list[str]):
        """Initialize the PrintFormatter with the keys to print."""
        self._keys = keys

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Output the data objects as a table."""
        if not data:
            return
        rows = [[str(row[key]) for key in self._keys] for row in data]
        for line in format_columns([key.upper() for key in self._keys], rows):
            print(line, file=file)


class StructFormatter(ABC):
    """A formatter that prints kubernetes objects."""

    @abstractmethod
    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Print the objects."""


class YamlFormatter(StructFormatter):
    """A formatter that prints a yaml document per object."""

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Print the objects."""
        print(
            yaml.dump_all(data, sort_keys=False, explicit_start=True), end="", file=file
        )


class JsonFormatter(StructFormatter):
    """A formatter that prints a json list of objects."""

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Print the objects."""
        json.dump(data, sort_keys=False, indent=4, fp=file)
        print(file=file)


FORMATTERS: dict[str, type[StructFormatter]] = {
    "yaml": YamlFormatter,
    "json": JsonFormatter,
}
