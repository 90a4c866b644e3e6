"""Type- and name-driven value generation for ordinary properties."""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Optional

from relseed.cache import ValueCache
from relseed.generators.base import PropertyValueGenerator
from relseed.models import PropertySchema, RawLiteral
from relseed.providers.random_provider import DEFAULT_STRING_LENGTH, RandomDataProvider
from relseed.seed_config import CustomPropertyConfig, PropertyConfig

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)

# Substrings of unknown type names -> family default
_FAMILY_DEFAULTS: list[tuple[tuple[str, ...], Callable[[], Any]]] = [
    (("int", "long", "short", "byte", "decimal", "double", "float", "single", "number",
      "numeric"), lambda: 0),
    (("string", "text", "char"), lambda: ""),
    (("date", "time"), lambda: EPOCH),
    (("guid", "uuid"), lambda: uuid.UUID(int=0)),
    (("bool",), lambda: False),
]


def default_for_type(type_name: str) -> Any:
    """
    Canonical zero value for a type the generator does not know.

    Examples:
        >>> default_for_type("UInt32")
        0
        >>> default_for_type("Geometry")
        RawLiteral(text='default')
    """
    lowered = type_name.lower()
    for keywords, factory in _FAMILY_DEFAULTS:
        if any(keyword in lowered for keyword in keywords):
            return factory()
    return RawLiteral("default")


class StandardPropertyGenerator(PropertyValueGenerator):
    """
    Generate values for non-key, non-enum properties.

    Values are cached per (type, property) and record index, so asking for
    the same record twice returns the same value.

    Args:
        provider: Random source for this run
        value_cache: Value cache for this run
        null_probability: Chance of null for nullable, non-required properties
    """

    def __init__(
        self,
        provider: RandomDataProvider,
        value_cache: Optional[ValueCache] = None,
        null_probability: float = 0.1,
    ):
        self.provider = provider
        self.value_cache = value_cache if value_cache is not None else ValueCache()
        self.null_probability = null_probability

        p = provider
        # Canonical type name -> value factory
        self.type_generators: dict[str, Callable[[PropertySchema, int], Any]] = {
            "String": self._generate_string,
            "Int32": lambda prop, _: p.random_int32(prop.min_value, prop.max_value),
            "Int64": lambda prop, _: p.random_int64(prop.min_value, prop.max_value),
            "Int16": lambda prop, _: p.random_int16(prop.min_value, prop.max_value),
            "Byte": lambda prop, _: p.random_byte(prop.min_value, prop.max_value),
            "Double": lambda prop, _: p.random_double(prop.min_value, prop.max_value),
            "Single": lambda prop, _: p.random_single(prop.min_value, prop.max_value),
            "Decimal": lambda prop, _: p.random_decimal(prop.min_value, prop.max_value),
            "Boolean": lambda prop, _: p.random_bool(),
            "DateTime": lambda prop, _: p.random_datetime(),
            "DateTimeOffset": lambda prop, _: p.random_datetimeoffset(),
            "TimeSpan": lambda prop, _: p.random_timespan(),
            "Guid": lambda prop, _: p.random_guid(),
            "Char": lambda prop, _: p.random_char(),
            "Byte[]": lambda prop, _: p.random_bytes(prop.max_length),
        }

    def generate_value(
        self,
        property: PropertySchema,
        record_index: int,
        property_config: Optional[PropertyConfig] = None,
    ) -> Any:
        """
        Generate (or recall) the value of a property for one record.

        A custom config short-circuits everything: its literal is returned
        verbatim as a ``RawLiteral`` and never cached.

        Args:
            property: Property being generated
            record_index: Zero-based record index
            property_config: Per-property configuration (if any)

        Returns:
            Typed value, or None for null
        """
        if isinstance(property_config, CustomPropertyConfig):
            return RawLiteral(property_config.value)

        type_key = property.full_type_name or property.type_name
        if self.value_cache.contains(type_key, property.name, record_index):
            return self.value_cache.get(type_key, property.name, record_index)

        value = self._generate_by_type(property, record_index)
        self.value_cache.set(type_key, property.name, record_index, value)
        return value

    def _generate_by_type(self, property: PropertySchema, record_index: int) -> Any:
        if (
            property.is_nullable
            and not property.is_required
            and self.provider.should_generate_null(self.null_probability)
        ):
            return None

        canonical = property.canonical_type
        generator = self.type_generators.get(canonical)
        if generator is None:
            logger.debug(
                f"No generator for type '{property.type_name}' of {property.name}, "
                f"using default"
            )
            return default_for_type(canonical)
        return generator(property, record_index)

    def _generate_string(self, property: PropertySchema, record_index: int) -> str:
        pattern = self.determine_string_pattern(property.name)
        if pattern is None:
            value = self.provider.random_string(
                property.max_length or DEFAULT_STRING_LENGTH, property.name, record_index
            )
        elif pattern == "lorem":
            value = self.provider.lorem(property.max_length)
        else:
            value = getattr(self.provider, pattern)()

        if property.max_length is not None and len(value) > property.max_length:
            value = value[: max(0, property.max_length)]
        return value

    @staticmethod
    def determine_string_pattern(property_name: str) -> Optional[str]:
        """
        Pick a semantic string generator from the property name.

        Args:
            property_name: Property name (any case)

        Returns:
            Name of the ``RandomDataProvider`` method to call, ``"lorem"`` for
            free text, or None for a plain alphanumeric string

        Examples:
            >>> StandardPropertyGenerator.determine_string_pattern("ContactEmail")
            'email'
            >>> StandardPropertyGenerator.determine_string_pattern("LastName")
            'last_name'
            >>> StandardPropertyGenerator.determine_string_pattern("Sku") is None
            True
        """
        name = property_name.lower()

        if "email" in name:
            return "email"
        if name.endswith("name"):
            if "first" in name:
                return "first_name"
            if "last" in name:
                return "last_name"
            if "full" in name:
                return "full_name"
            if "company" in name or "business" in name:
                return "company_name"
            return "first_name"
        if "address" in name:
            return "address"
        if "phone" in name:
            return "phone_number"
        if "url" in name or "website" in name or "site" in name:
            return "url"
        if "username" in name or "login" in name:
            return "username"
        if "password" in name or "pwd" in name:
            return "password"
        if "job" in name or "title" in name or "position" in name:
            return "job_title"
        if "description" in name or "content" in name or "text" in name:
            return "lorem"
        return None
