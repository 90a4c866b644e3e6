"""Cartesian expansion of fixed property values."""

import itertools
from dataclasses import dataclass, field


@dataclass
class PropertyWithFixedValues:
    """A property and the fixed values it may take, in order."""

    property_name: str
    fixed_values: list[str] = field(default_factory=list)


@dataclass
class Combination:
    """One full assignment of fixed values: property name -> value."""

    property_values: dict[str, str] = field(default_factory=dict)


def generate_all_combinations(properties: list[PropertyWithFixedValues]) -> list[Combination]:
    """
    Expand fixed values into every possible assignment.

    Properties are processed in input order: the first property varies
    slowest, the last fastest. There is no cap on the result size.

    Args:
        properties: Properties with their fixed values

    Returns:
        All combinations. An empty input gives one empty combination; a
        property without values gives none.

    Example:
        >>> combos = generate_all_combinations([
        ...     PropertyWithFixedValues("Size", ["S", "L"]),
        ...     PropertyWithFixedValues("Color", ["Red", "Blue"]),
        ... ])
        >>> [c.property_values for c in combos][:2]
        [{'Size': 'S', 'Color': 'Red'}, {'Size': 'S', 'Color': 'Blue'}]
    """
    names = [p.property_name for p in properties]
    return [
        Combination(dict(zip(names, values)))
        for values in itertools.product(*(p.fixed_values for p in properties))
    ]
