"""Value generators for entity properties."""

from relseed.generators.base import PropertyValueGenerator
from relseed.generators.combinations import (
    Combination,
    PropertyWithFixedValues,
    generate_all_combinations,
)
from relseed.generators.enum_values import EnumValueGenerator
from relseed.generators.keys import KeyGenerator, deterministic_guid
from relseed.generators.standard import StandardPropertyGenerator

__all__ = [
    "Combination",
    "EnumValueGenerator",
    "KeyGenerator",
    "PropertyValueGenerator",
    "PropertyWithFixedValues",
    "StandardPropertyGenerator",
    "deterministic_guid",
    "generate_all_combinations",
]
