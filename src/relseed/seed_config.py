"""Per-entity seed configuration.

Record counts, parent/child fan-out, fixed values and per-property strategies.
The generator only reads these objects; total record counts are derived on
read by ``compute_total_record_count`` rather than stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union

from relseed.exceptions import ParentCycleError


class EnumValueStrategy(str, Enum):
    """How enum values are chosen per record."""

    USE_ALL = "UseAll"
    USE_SPECIFIC = "UseSpecific"
    RANDOM = "Random"
    CUSTOM = "Custom"


class RelationshipStrategy(str, Enum):
    """How child records are mapped onto parent records."""

    ONE_TO_ONE = "OneToOne"
    MANY_TO_ONE = "ManyToOne"
    ONE_TO_MANY = "OneToMany"
    CUSTOM = "Custom"


@dataclass
class PropertyConfig:
    """
    Standard per-property configuration.

    Attributes:
        property_name: Property the config applies to
        exclude_from_seed: Leave the property out of generated records
        fixed_values: Candidate values; every combination of fixed values
            across the entity's properties gets its own records
    """

    kind: ClassVar[str] = "standard"

    property_name: str
    exclude_from_seed: bool = False
    fixed_values: list[str] = field(default_factory=list)

    @property
    def use_custom_strategy(self) -> bool:
        return False

    @property
    def has_fixed_values(self) -> bool:
        return len(self.fixed_values) > 0


@dataclass
class CustomPropertyConfig(PropertyConfig):
    """
    Property pinned to one literal, emitted verbatim for every record.

    The literal is not validated; ``"DateTime.UtcNow"`` or ``"42"`` are
    written to the output exactly as given.
    """

    kind: ClassVar[str] = "custom"

    value: str = ""

    @property
    def use_custom_strategy(self) -> bool:
        return True


# record index -> member name, or list of member names for combined flags
EnumMapping = dict[int, Union[str, list[str]]]


@dataclass
class EnumPropertyConfig(PropertyConfig):
    """
    Enum property configuration.

    Attributes:
        strategy: Value selection strategy
        selected_values: Subset used by UseSpecific
        value_count: Members combined per record (Random + flags)
        combine_flags: Combine several members for flag enums
        custom_mapping: Explicit record index -> value(s) for Custom
    """

    kind: ClassVar[str] = "enum"

    strategy: EnumValueStrategy = EnumValueStrategy.USE_ALL
    selected_values: list[str] = field(default_factory=list)
    value_count: int = 1
    combine_flags: bool = False
    custom_mapping: EnumMapping = field(default_factory=dict)


@dataclass
class RelationshipConfig:
    """
    Mapping of child records onto a related (parent) entity's records.

    Attributes:
        related_entity_name: Entity referenced by the foreign key
        strategy: Mapping strategy
        parent_record_count: Number of parents shared by all children (ManyToOne)
        children_per_parent: Children assigned to each parent (OneToMany)
        custom_mapping: Explicit child index -> parent index (Custom)
    """

    related_entity_name: str
    strategy: RelationshipStrategy = RelationshipStrategy.ONE_TO_ONE
    parent_record_count: int = 1
    children_per_parent: int = 2
    custom_mapping: dict[int, int] = field(default_factory=dict)

    def get_parent_index(self, child_index: int, parent_count: int) -> Optional[int]:
        """
        Map a child record to a zero-based parent record index.

        Args:
            child_index: Zero-based child record index
            parent_count: Number of parent records available

        Returns:
            Parent index, or None when it falls outside the parent records

        Example:
            >>> config = RelationshipConfig("Author", RelationshipStrategy.ONE_TO_MANY,
            ...                             children_per_parent=3)
            >>> [config.get_parent_index(i, 10) for i in range(4)]
            [0, 0, 0, 1]
        """
        if parent_count <= 0:
            return None

        if self.strategy == RelationshipStrategy.CUSTOM and child_index in self.custom_mapping:
            index = self.custom_mapping[child_index]
        elif self.strategy == RelationshipStrategy.ONE_TO_MANY and self.children_per_parent > 0:
            index = child_index // self.children_per_parent
        elif self.strategy == RelationshipStrategy.MANY_TO_ONE:
            index = child_index % max(1, min(self.parent_record_count, parent_count))
        else:
            index = child_index

        if 0 <= index < parent_count:
            return index
        return None


@dataclass(eq=False)
class EntityConfig:
    """
    Seed configuration for one entity.

    Attributes:
        entity_name: Entity the config applies to
        record_count: Direct record count (used when there is no parent)
        records_per_parent: Children generated for each parent record
        parent: Parent entity config; children fan out from its records
        is_selected: Whether the entity is generated at all
        property_configs: Per-property configuration
        relationship_configs: Per-relationship configuration
    """

    entity_name: str
    record_count: int = 10
    records_per_parent: int = 2
    parent: Optional[EntityConfig] = field(default=None, repr=False)
    is_selected: bool = True
    property_configs: list[PropertyConfig] = field(default_factory=list)
    relationship_configs: list[RelationshipConfig] = field(default_factory=list)

    @property
    def has_parent(self) -> bool:
        return self.parent is not None

    @property
    def total_record_count(self) -> int:
        """Derived record count, see ``compute_total_record_count``."""
        return compute_total_record_count(self)

    def get_property_config(self, property_name: str) -> Optional[PropertyConfig]:
        """Get the config for a property (case-insensitive)."""
        lowered = property_name.lower()
        return next(
            (pc for pc in self.property_configs if pc.property_name.lower() == lowered),
            None,
        )

    def get_relationship_config(self, related_entity_name: str) -> Optional[RelationshipConfig]:
        """Get the config for a related entity (case-insensitive)."""
        lowered = related_entity_name.lower()
        return next(
            (
                rc
                for rc in self.relationship_configs
                if rc.related_entity_name.lower() == lowered
            ),
            None,
        )

    def set_property_config(self, config: PropertyConfig) -> None:
        """Add or replace the config for a property."""
        lowered = config.property_name.lower()
        for i, existing in enumerate(self.property_configs):
            if existing.property_name.lower() == lowered:
                self.property_configs[i] = config
                return
        self.property_configs.append(config)


def compute_total_record_count(config: EntityConfig) -> int:
    """
    Compute the total number of records an entity config produces.

    With a parent: parent's total x records_per_parent. Without one: the
    direct record count.

    Args:
        config: Entity config

    Returns:
        Total record count

    Raises:
        ParentCycleError: If the parent chain loops back on itself

    Example:
        >>> author = EntityConfig("Author", record_count=3)
        >>> book = EntityConfig("Book", records_per_parent=2, parent=author)
        >>> compute_total_record_count(book)
        6
    """
    chain: list[EntityConfig] = []
    current: Optional[EntityConfig] = config
    while current is not None:
        if any(current is seen for seen in chain):
            names = [c.entity_name for c in chain] + [current.entity_name]
            raise ParentCycleError(names)
        chain.append(current)
        current = current.parent

    # chain[-1] is the root; fan out towards the requested config
    total = chain[-1].record_count
    for link in reversed(chain[:-1]):
        total *= link.records_per_parent
    return total


@dataclass
class SeedDataConfig:
    """All entity configs for one generation run."""

    entity_configs: list[EntityConfig] = field(default_factory=list)

    def get_entity_config(self, entity_name: str) -> Optional[EntityConfig]:
        """Get the config for an entity (case-insensitive)."""
        lowered = entity_name.lower()
        return next(
            (ec for ec in self.entity_configs if ec.entity_name.lower() == lowered),
            None,
        )

    def update_entity_config(self, config: EntityConfig) -> None:
        """Add or replace the config for an entity."""
        lowered = config.entity_name.lower()
        for i, existing in enumerate(self.entity_configs):
            if existing.entity_name.lower() == lowered:
                self.entity_configs[i] = config
                return
        self.entity_configs.append(config)

    def validate(self) -> list[str]:
        """
        Validate configuration consistency.

        Checks:
        - Parent chains are acyclic
        - Record counts and fan-out ratios are not negative

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        for config in self.entity_configs:
            try:
                compute_total_record_count(config)
            except ParentCycleError as e:
                errors.append(
                    f"Entity '{config.entity_name}': parent cycle "
                    f"{' -> '.join(e.entities)}"
                )

            if config.record_count < 0:
                errors.append(
                    f"Entity '{config.entity_name}': record_count "
                    f"{config.record_count} is negative"
                )
            if config.has_parent and config.records_per_parent < 0:
                errors.append(
                    f"Entity '{config.entity_name}': records_per_parent "
                    f"{config.records_per_parent} is negative"
                )
        return errors
