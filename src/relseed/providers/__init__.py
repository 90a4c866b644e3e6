"""Primitive value sources and literal formatting."""

from relseed.providers.literals import escape_string, format_literal, parse_literal
from relseed.providers.random_provider import RandomDataProvider

__all__ = ["RandomDataProvider", "escape_string", "format_literal", "parse_literal"]
