"""Data models and type definitions.

Defines the entity schema graph consumed by the generator and the typed
record layer it produces before any text serialization happens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from relseed.cache import GeneratedKeyRegistry

# Lowercased spelling -> canonical .NET type name
TYPE_ALIASES = {
    "string": "String",
    "int": "Int32",
    "int32": "Int32",
    "long": "Int64",
    "int64": "Int64",
    "short": "Int16",
    "int16": "Int16",
    "byte": "Byte",
    "double": "Double",
    "float": "Single",
    "single": "Single",
    "decimal": "Decimal",
    "bool": "Boolean",
    "boolean": "Boolean",
    "char": "Char",
    "datetime": "DateTime",
    "datetimeoffset": "DateTimeOffset",
    "timespan": "TimeSpan",
    "guid": "Guid",
    "byte[]": "Byte[]",
}

INTEGER_KEY_TYPES = frozenset({"Int32", "Int64", "Int16"})

# Synthetic property emitted by the compiler for record types
EQUALITY_CONTRACT = "EqualityContract"

# Diagnostic kinds
MISSING_PARENT_KEYS = "missing_parent_keys"
DEPENDENCY_CYCLE = "dependency_cycle"
UNKNOWN_FK_TARGET = "unknown_fk_target"
ABSTRACT_ENTITY = "abstract_entity"


def normalize_type_name(type_name: str) -> str:
    """
    Reduce a declared type name to its canonical .NET spelling.

    Strips ``System.`` prefixes and nullable wrappers and resolves C# keyword
    aliases. Names that are not built-in types (enums, classes) come back
    unchanged apart from the nullable wrapper.

    Examples:
        >>> normalize_type_name("int?")
        'Int32'
        >>> normalize_type_name("Nullable<System.Guid>")
        'Guid'
        >>> normalize_type_name("OrderStatus?")
        'OrderStatus'
    """
    name = type_name.strip()
    if name.startswith("Nullable<") and name.endswith(">"):
        name = name[len("Nullable<") : -1].strip()
    if name.endswith("?"):
        name = name[:-1]
    if name.startswith("System."):
        name = name[len("System.") :]
    return TYPE_ALIASES.get(name.lower(), name)


class RelationshipType(str, Enum):
    """Cardinality of a navigation between two entities."""

    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"


class DeleteBehavior(str, Enum):
    """What happens to dependents when the principal row is deleted."""

    CASCADE = "Cascade"
    RESTRICT = "Restrict"
    SET_NULL = "SetNull"
    SET_DEFAULT = "SetDefault"
    NO_ACTION = "NoAction"
    CLIENT_SET_NULL = "ClientSetNull"


@dataclass
class RelationshipInfo:
    """
    Navigation relationship between two entities.

    Attributes:
        source_entity_name: Entity declaring the navigation
        target_entity_name: Entity on the other end
        relation_type: Cardinality of the relationship
        source_navigation_property_name: Navigation on the source entity
        target_navigation_property_name: Inverse navigation (if any)
        foreign_key_property_name: FK property carrying the reference
        principal_key_property_name: Referenced key on the target
        is_required: Whether the relationship is mandatory
        delete_behavior: Delete behavior configured for the relationship
    """

    source_entity_name: str
    target_entity_name: str
    relation_type: RelationshipType = RelationshipType.MANY_TO_ONE
    source_navigation_property_name: Optional[str] = None
    target_navigation_property_name: Optional[str] = None
    foreign_key_property_name: Optional[str] = None
    principal_key_property_name: Optional[str] = None
    is_required: bool = False
    delete_behavior: DeleteBehavior = DeleteBehavior.CASCADE

    @property
    def is_self_referencing(self) -> bool:
        """Check if the relationship points back at its own entity."""
        return self.source_entity_name == self.target_entity_name

    def __str__(self) -> str:
        return (
            f"{self.source_entity_name}.{self.source_navigation_property_name} -> "
            f"{self.target_entity_name} ({self.relation_type.value})"
        )


@dataclass
class PropertySchema:
    """
    Property metadata for a single entity field.

    Attributes:
        name: Property name
        type_name: Declared type (e.g. ``Int32``, ``string``, ``OrderStatus?``)
        full_type_name: Fully qualified type name (defaults to type_name)
        is_nullable: Whether the property accepts null
        is_required: Whether a value is mandatory
        is_key: Whether the property is (part of) the primary key
        is_foreign_key: Whether the property references another entity
        foreign_key_target_entity: Name of the referenced entity
        is_enum: Whether the type is an enum
        enum_values: Enum member names in declaration order
        is_enum_flags: Whether the enum is a bit-flag enum
        is_navigation_property: Reference navigation (never seeded)
        is_collection: Collection navigation (never seeded)
        exclude_from_seed: Explicitly excluded from generated data
        min_value: Lower numeric bound
        max_value: Upper numeric bound
        max_length: Maximum string / byte-array length
        is_read_only: Property has no setter
    """

    name: str
    type_name: str
    full_type_name: Optional[str] = None
    is_nullable: bool = False
    is_required: bool = False
    is_key: bool = False
    is_foreign_key: bool = False
    foreign_key_target_entity: Optional[str] = None
    is_enum: bool = False
    enum_values: list[str] = field(default_factory=list)
    is_enum_flags: bool = False
    is_navigation_property: bool = False
    is_collection: bool = False
    exclude_from_seed: bool = False
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    max_length: Optional[int] = None
    is_read_only: bool = False

    def __post_init__(self) -> None:
        if self.full_type_name is None:
            self.full_type_name = self.type_name

    @property
    def canonical_type(self) -> str:
        """Declared type reduced to its canonical .NET name."""
        return normalize_type_name(self.type_name)

    @property
    def is_seedable(self) -> bool:
        """
        Check if the property receives a value in seed records.

        Navigation and collection properties, the synthetic
        ``EqualityContract`` of record types, read-only and excluded
        properties are never seeded.
        """
        return not (
            self.exclude_from_seed
            or self.is_navigation_property
            or self.is_collection
            or self.is_read_only
            or self.name == EQUALITY_CONTRACT
        )


@dataclass
class EntitySchema:
    """
    Entity metadata: a relational record type with named, typed fields.

    Attributes:
        name: Entity (class) name
        namespace: Namespace the entity lives in
        properties: Properties in declaration order
        relationships: Navigation relationships from this entity
        is_abstract: Abstract entities cannot be instantiated
        uses_inheritance: Entity derives from another entity
        base_type_name: Base entity name (inheritance)
        table_name: Mapped table name (defaults to entity name)
        schema_name: Mapped database schema
    """

    name: str
    properties: list[PropertySchema] = field(default_factory=list)
    namespace: Optional[str] = None
    relationships: list[RelationshipInfo] = field(default_factory=list)
    is_abstract: bool = False
    uses_inheritance: bool = False
    base_type_name: Optional[str] = None
    table_name: Optional[str] = None
    schema_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        """Namespace-qualified entity name."""
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def full_table_name(self) -> str:
        """Schema-qualified table name."""
        table = self.table_name or self.name
        if self.schema_name:
            return f"{self.schema_name}.{table}"
        return table

    @property
    def key_property(self) -> Optional[PropertySchema]:
        """First key property (composite keys report their first member)."""
        return next((p for p in self.properties if p.is_key), None)

    @property
    def key_properties(self) -> list[PropertySchema]:
        """All key properties."""
        return [p for p in self.properties if p.is_key]

    @property
    def foreign_key_properties(self) -> list[PropertySchema]:
        """All foreign key properties."""
        return [p for p in self.properties if p.is_foreign_key]

    def get_property(self, name: str) -> Optional[PropertySchema]:
        """Get a property by name (case-insensitive)."""
        lowered = name.lower()
        return next((p for p in self.properties if p.name.lower() == lowered), None)

    def get_dependent_entity_names(self) -> list[str]:
        """
        Get the distinct entities this entity references through foreign keys.

        Returns:
            Target entity names in property order, without duplicates
        """
        names: list[str] = []
        for prop in self.foreign_key_properties:
            target = prop.foreign_key_target_entity
            if target and target not in names:
                names.append(target)
        return names

    def __str__(self) -> str:
        return (
            f"{self.name} ({len(self.properties)} properties, "
            f"{len(self.key_properties)} keys)"
        )


@dataclass(frozen=True)
class RawLiteral:
    """Literal text passed through to the output verbatim."""

    text: str


@dataclass(frozen=True)
class EnumValue:
    """
    One enum value, or a combination of flag members.

    Attributes:
        type_name: Enum type name
        members: Selected member names (more than one for combined flags)
    """

    type_name: str
    members: tuple[str, ...]


@dataclass
class SeedRecord:
    """
    A single generated record before serialization.

    Attributes:
        entity_name: Entity the record belongs to
        index: Zero-based record index within the entity
        values: Property name -> typed value, in property order
    """

    entity_name: str
    index: int
    values: dict[str, Any] = field(default_factory=dict)


@dataclass
class EntityBlock:
    """
    Generated output for one entity.

    A block either holds records or, when the entity could not be generated,
    a placeholder explaining why. ``property_types`` maps each seeded
    property to its declared type so formatters can pick literal forms.
    """

    entity_name: str
    records: list[SeedRecord] = field(default_factory=list)
    placeholder: Optional[str] = None
    property_types: dict[str, str] = field(default_factory=dict)

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


@dataclass
class Diagnostic:
    """
    Non-fatal problem found during generation.

    Attributes:
        kind: One of ``missing_parent_keys``, ``dependency_cycle``,
            ``unknown_fk_target``, ``abstract_entity``
        entity_name: Entity the diagnostic refers to
        message: Human-readable explanation
    """

    kind: str
    entity_name: str
    message: str


@dataclass
class GenerationResult:
    """
    Outcome of one generation run.

    Attributes:
        blocks: Entity blocks in dependency order
        diagnostics: Non-fatal problems encountered
        keys: Primary keys generated per entity
        order: Resolved entity order (including skipped entities)
    """

    blocks: list[EntityBlock] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    keys: Optional[GeneratedKeyRegistry] = None
    order: list[str] = field(default_factory=list)

    def get_block(self, entity_name: str) -> Optional[EntityBlock]:
        """Get the block generated for an entity, if any."""
        return next((b for b in self.blocks if b.entity_name == entity_name), None)

    def records(self, entity_name: str) -> list[SeedRecord]:
        """Get generated records for an entity (empty if skipped)."""
        block = self.get_block(entity_name)
        return block.records if block else []


@dataclass
class SeedRow:
    """
    A single row of seed data with attribute access.

    Allows accessing property values as attributes:
        row.Id        # Key value
        row.AuthorId  # Foreign key value

    Attributes:
        _data: Raw property data dict
    """

    _data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        """
        Allow attribute access to property values.

        Raises:
            AttributeError: If property doesn't exist in the row
        """
        if name.startswith("_"):
            raise AttributeError(f"No attribute '{name}'")
        if name in self._data:
            return self._data[name]
        raise AttributeError(f"No property '{name}' in seed data")

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


class Seeds:
    """
    Container for generated seed data with attribute access.

    Allows accessing entities as attributes:
        seeds.Author  # List of SeedRow objects
        seeds.Book    # List of SeedRow objects
    """

    def __init__(self):
        self._entities: dict[str, list[SeedRow]] = {}

    @classmethod
    def from_result(cls, result: GenerationResult) -> Seeds:
        """Build a Seeds view over the records of a generation result."""
        seeds = cls()
        for block in result.blocks:
            if not block.is_placeholder:
                seeds.add_entity(block.entity_name, [r.values for r in block.records])
        return seeds

    def add_entity(self, entity_name: str, rows: list[dict[str, Any]]) -> None:
        """Add seed data for an entity."""
        self._entities[entity_name] = [SeedRow(_data=dict(row)) for row in rows]

    @property
    def entity_names(self) -> list[str]:
        return list(self._entities)

    def __getattr__(self, name: str) -> list[SeedRow]:
        """
        Allow attribute access to entities.

        Raises:
            AttributeError: If entity doesn't exist in seeds
        """
        if name.startswith("_"):
            raise AttributeError(f"No attribute '{name}'")
        if name in self._entities:
            return self._entities[name]
        raise AttributeError(f"No entity '{name}' in seeds")

    def __getitem__(self, name: str) -> list[SeedRow]:
        return self._entities[name]

    def to_records(self) -> dict[str, list[dict[str, Any]]]:
        """
        Convert to JSON-compatible records.

        Returns:
            Entity name -> list of row dicts with plain JSON values
        """
        from relseed.formatters.records import to_plain_value

        return {
            name: [
                {key: to_plain_value(value) for key, value in row.to_dict().items()}
                for row in rows
            ]
            for name, rows in self._entities.items()
        }

    def to_json(self, path: Optional[Union[str, Path]] = None, indent: int = 2) -> str:
        """
        Export all seed data as JSON.

        Args:
            path: Optional file to write
            indent: JSON indentation

        Returns:
            JSON text (entity name -> list of rows)
        """
        import json

        text = json.dumps(self.to_records(), indent=indent, ensure_ascii=False)
        if path is not None:
            Path(path).write_text(text, encoding="utf-8")
        return text

    def to_csv(self, entity_name: str, path: Union[str, Path]) -> None:
        """
        Export one entity's rows to a CSV file.

        Columns are the union of row keys in first-seen order; omitted
        properties become empty cells.

        Raises:
            KeyError: If the entity has no seed data
        """
        import csv

        rows = self.to_records()[entity_name]
        columns: list[str] = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)
