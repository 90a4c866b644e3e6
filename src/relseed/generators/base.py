"""Base property generator interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from relseed.models import PropertySchema
from relseed.providers.literals import format_literal
from relseed.seed_config import PropertyConfig


class PropertyValueGenerator(ABC):
    """
    Base class for property value generators.

    Subclasses produce a typed value for one property of one record;
    ``generate`` formats that value as literal text.

    Example:
        >>> class ZeroGenerator(PropertyValueGenerator):
        ...     def generate_value(self, property, record_index, property_config=None):
        ...         return 0
        >>> ZeroGenerator().generate(PropertySchema("Count", "int"), 0)
        '0'
    """

    @abstractmethod
    def generate_value(
        self,
        property: PropertySchema,
        record_index: int,
        property_config: Optional[PropertyConfig] = None,
    ) -> Any:
        """
        Generate a typed value for a property.

        Args:
            property: Property being generated
            record_index: Zero-based record index
            property_config: Per-property configuration (if any)

        Returns:
            Typed value (see ``SeedRecord``), or None for null
        """
        pass

    def generate(
        self,
        property: PropertySchema,
        record_index: int,
        property_config: Optional[PropertyConfig] = None,
    ) -> str:
        """Generate a value and format it as a literal."""
        value = self.generate_value(property, record_index, property_config)
        return format_literal(value, property.type_name)
