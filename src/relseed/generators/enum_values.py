"""Enum value selection strategies."""

import logging
from typing import Optional, Union

from relseed.cache import EnumValueCache
from relseed.models import EnumValue, PropertySchema, normalize_type_name
from relseed.providers.literals import format_literal
from relseed.providers.random_provider import RandomDataProvider
from relseed.seed_config import EnumPropertyConfig, EnumValueStrategy, PropertyConfig

logger = logging.getLogger(__name__)


class EnumValueGenerator:
    """
    Choose enum members for records according to an ``EnumPropertyConfig``.

    Strategies:
        - UseAll: cycle through every member in declaration order
        - UseSpecific: cycle through a chosen subset (first member if empty)
        - Random: one draw per record, remembered for repeated calls; flag
          enums may combine several distinct members
        - Custom: explicit record index -> member(s), first member otherwise

    Properties without an enum config use UseAll.

    Example:
        >>> gen = EnumValueGenerator(RandomDataProvider(seed=1))
        >>> status = PropertySchema("Status", "OrderStatus", is_enum=True,
        ...                         enum_values=["Pending", "Shipped", "Done"])
        >>> [gen.generate(status, i) for i in range(4)]
        ['OrderStatus.Pending', 'OrderStatus.Shipped', 'OrderStatus.Done', 'OrderStatus.Pending']
    """

    def __init__(
        self,
        provider: RandomDataProvider,
        enum_cache: Optional[EnumValueCache] = None,
    ):
        self.provider = provider
        self.enum_cache = enum_cache if enum_cache is not None else EnumValueCache()

    def generate(
        self,
        property: PropertySchema,
        record_index: int,
        enum_config: Optional[PropertyConfig] = None,
    ) -> str:
        """
        Generate the enum literal for one record.

        Args:
            property: Enum property
            record_index: Zero-based record index
            enum_config: Property config; anything but an EnumPropertyConfig
                means UseAll

        Returns:
            Literal such as ``OrderStatus.Shipped`` or
            ``Permissions.Read | Permissions.Write``; empty string for
            non-enum properties or enums without members
        """
        value = self.select(property, record_index, enum_config)
        if value is None:
            return ""
        return format_literal(value)

    def select(
        self,
        property: PropertySchema,
        record_index: int,
        enum_config: Optional[PropertyConfig] = None,
    ) -> Optional[EnumValue]:
        """
        Select enum member(s) for one record.

        Returns:
            Selected value, or None for non-enum properties or enums
            without members
        """
        if not property.is_enum or not property.enum_values:
            return None

        type_name = normalize_type_name(property.type_name)
        members = property.enum_values

        if not isinstance(enum_config, EnumPropertyConfig):
            return EnumValue(type_name, (members[record_index % len(members)],))

        strategy = enum_config.strategy
        if strategy == EnumValueStrategy.USE_ALL:
            chosen: tuple[str, ...] = (members[record_index % len(members)],)
        elif strategy == EnumValueStrategy.USE_SPECIFIC:
            chosen = self._select_specific(members, record_index, enum_config)
        elif strategy == EnumValueStrategy.RANDOM:
            chosen = self._select_random(property, record_index, enum_config)
        elif strategy == EnumValueStrategy.CUSTOM:
            chosen = self._select_custom(members, record_index, enum_config)
        else:
            chosen = (members[0],)

        return EnumValue(type_name, chosen)

    @staticmethod
    def _select_specific(
        members: list[str], record_index: int, config: EnumPropertyConfig
    ) -> tuple[str, ...]:
        if not config.selected_values:
            return (members[0],)
        return (config.selected_values[record_index % len(config.selected_values)],)

    def _select_random(
        self, property: PropertySchema, record_index: int, config: EnumPropertyConfig
    ) -> tuple[str, ...]:
        cache_key = property.full_type_name or property.type_name
        cached = self.enum_cache.get(cache_key, record_index)
        if cached is not None:
            return cached

        members = property.enum_values
        if property.is_enum_flags and config.combine_flags and config.value_count > 1:
            chosen = tuple(self.provider.sample(members, config.value_count))
        else:
            chosen = (self.provider.choice(members),)

        self.enum_cache.set(cache_key, record_index, chosen)
        return chosen

    @staticmethod
    def _select_custom(
        members: list[str], record_index: int, config: EnumPropertyConfig
    ) -> tuple[str, ...]:
        mapped: Union[str, list[str], None] = config.custom_mapping.get(record_index)
        if isinstance(mapped, str):
            return (mapped,)
        if mapped:
            return tuple(mapped)
        return (members[0],)
