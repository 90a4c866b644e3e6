"""Seed generation orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from relseed.cache import EnumValueCache, GeneratedKeyRegistry, ValueCache
from relseed.config import Config
from relseed.dependency import DependencyOrder, resolve_dependency_order
from relseed.formatters import CSharpSeedFormatter, RecordFormatter
from relseed.generators import (
    Combination,
    EnumValueGenerator,
    KeyGenerator,
    PropertyWithFixedValues,
    StandardPropertyGenerator,
    generate_all_combinations,
)
from relseed.models import (
    ABSTRACT_ENTITY,
    DEPENDENCY_CYCLE,
    MISSING_PARENT_KEYS,
    UNKNOWN_FK_TARGET,
    Diagnostic,
    EntityBlock,
    EntitySchema,
    EnumValue,
    GenerationResult,
    PropertySchema,
    RawLiteral,
    SeedRecord,
)
from relseed.providers.random_provider import RandomDataProvider
from relseed.seed_config import EntityConfig, SeedDataConfig

logger = logging.getLogger(__name__)

# Marks a property that is left out of the record
_OMIT = object()


@dataclass
class _RunContext:
    """Per-invocation state shared by all entities of one run."""

    provider: RandomDataProvider
    standard: StandardPropertyGenerator
    enums: EnumValueGenerator
    keys: GeneratedKeyRegistry
    entities: dict[str, EntitySchema]
    result: GenerationResult
    reported: set[tuple[str, str]] = field(default_factory=set)

    def resolve_name(self, name: Optional[str]) -> Optional[str]:
        """Map an entity name (any case) to its schema name."""
        return _match_entity_name(self.entities, name)


def _match_entity_name(names: Iterable[str], name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    names = list(names)
    if name in names:
        return name
    lowered = name.lower()
    return next((n for n in names if n.lower() == lowered), None)


class SeedDataGenerator:
    """
    Generate dependency-ordered seed records for a set of entities.

    Each call to ``build`` (or ``generate``) is independent: it creates its
    own random source, caches and key registry. Generation never raises for
    data problems (missing parents, cycles, dangling references, unknown
    types); those end up as placeholders and diagnostics on the result.

    Example:
        >>> generator = SeedDataGenerator()
        >>> text = generator.generate(entities, seed_config)
        >>> result = generator.build(entities, seed_config)
        >>> result.records("Book")[0].values["AuthorId"]
        UUID('...')
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        formatter: Optional[RecordFormatter] = None,
    ):
        """
        Initialize generator.

        Args:
            settings: Generation and output settings (defaults to Config())
            formatter: Output formatter (defaults to C# HasData output)
        """
        self.settings = settings or Config()
        if formatter is None:
            formatter = CSharpSeedFormatter(self.settings.output)
        self.formatter = formatter

    def generate(self, entities: list[EntitySchema], config: SeedDataConfig) -> str:
        """
        Generate seed data and render it with the configured formatter.

        Args:
            entities: Entity schemas in declaration order
            config: Seed configuration

        Returns:
            Rendered output text
        """
        return self.formatter.render(self.build(entities, config))

    def resolve_order(
        self, entities: list[EntitySchema], config: SeedDataConfig
    ) -> DependencyOrder:
        """
        Resolve the generation order used by ``build``.

        Parent links in the config order entities even without a foreign key
        between them. Config names match schema names in any case.
        """
        names = [entity.name for entity in entities]
        extra_edges = []
        for entity_config in config.entity_configs:
            if entity_config.parent is None:
                continue
            child = _match_entity_name(names, entity_config.entity_name)
            parent = _match_entity_name(names, entity_config.parent.entity_name)
            if child and parent:
                extra_edges.append((child, parent))
        return resolve_dependency_order(entities, extra_edges)

    def build(self, entities: list[EntitySchema], config: SeedDataConfig) -> GenerationResult:
        """
        Generate typed seed records.

        Args:
            entities: Entity schemas in declaration order
            config: Seed configuration

        Returns:
            Blocks in dependency order, diagnostics and generated keys
        """
        generation = self.settings.generation
        provider = RandomDataProvider(seed=generation.random_seed, locale=generation.locale)
        keys = GeneratedKeyRegistry()
        context = _RunContext(
            provider=provider,
            standard=StandardPropertyGenerator(
                provider, ValueCache(), null_probability=generation.null_probability
            ),
            enums=EnumValueGenerator(provider, EnumValueCache()),
            keys=keys,
            entities={entity.name: entity for entity in entities},
            result=GenerationResult(keys=keys),
        )
        result = context.result

        ordered = self.resolve_order(entities, config)
        result.order = ordered.order

        for cycle in ordered.cycles:
            result.diagnostics.append(
                Diagnostic(
                    DEPENDENCY_CYCLE,
                    cycle[0],
                    f"Circular dependency {' -> '.join(cycle)}; some foreign keys "
                    f"may not resolve",
                )
            )

        for name in ordered.order:
            entity = context.entities[name]
            entity_config = config.get_entity_config(name)
            if entity_config is None or not entity_config.is_selected:
                continue

            if entity.is_abstract:
                logger.warning(f"Skipping abstract entity '{name}'")
                result.diagnostics.append(
                    Diagnostic(ABSTRACT_ENTITY, name, f"'{name}' is abstract and cannot be seeded")
                )
                continue

            block = self._generate_entity(entity, entity_config, context)
            if block is not None:
                result.blocks.append(block)

        return result

    def _generate_entity(
        self, entity: EntitySchema, entity_config: EntityConfig, context: _RunContext
    ) -> Optional[EntityBlock]:
        """Generate one entity block, or None when the entity yields no records."""
        parent_name = None
        if entity_config.parent is not None:
            parent_name = (
                context.resolve_name(entity_config.parent.entity_name)
                or entity_config.parent.entity_name
            )
            if not context.keys.has_keys(parent_name):
                message = (
                    f"Parent entity '{parent_name}' has no generated records; "
                    f"'{entity.name}' needs its seed data first"
                )
                logger.warning(f"Skipping '{entity.name}': {message}")
                context.result.diagnostics.append(
                    Diagnostic(MISSING_PARENT_KEYS, entity.name, message)
                )
                return EntityBlock(entity.name, placeholder=message)
            count = context.keys.count(parent_name) * entity_config.records_per_parent
        else:
            count = entity_config.record_count

        if count <= 0:
            logger.debug(f"Skipping '{entity.name}': no records requested")
            return None

        properties = [
            p
            for p in entity.properties
            if p.is_seedable and not self._excluded_by_config(p, entity_config)
        ]
        combinations = self._fixed_value_combinations(
            entity, properties, entity_config, parent_name
        )
        records_per_combination = max(1, count // len(combinations))
        total = records_per_combination * len(combinations)
        logger.debug(
            f"Generating {total} records for '{entity.name}' "
            f"({len(combinations)} x {records_per_combination}, {count} requested)"
        )

        key_generator = KeyGenerator(entity.name, self.settings.generation.guid_salt)
        context.keys.start(entity.name)

        block = EntityBlock(
            entity.name, property_types={p.name: p.type_name for p in properties}
        )
        for index in range(total):
            combination = combinations[index // records_per_combination]
            values: dict[str, Any] = {}
            for prop in properties:
                value = self._generate_property(
                    entity, prop, index, entity_config, parent_name, combination,
                    key_generator, context,
                )
                if value is not _OMIT:
                    values[prop.name] = value
            block.records.append(SeedRecord(entity.name, index, values))

        return block

    @staticmethod
    def _excluded_by_config(prop: PropertySchema, entity_config: EntityConfig) -> bool:
        property_config = entity_config.get_property_config(prop.name)
        return property_config is not None and property_config.exclude_from_seed

    def _fixed_value_combinations(
        self,
        entity: EntitySchema,
        properties: list[PropertySchema],
        entity_config: EntityConfig,
        parent_name: Optional[str],
    ) -> list[Combination]:
        """Expand fixed values of properties that are not keys or parent references."""
        fixed = []
        for prop in properties:
            if prop.is_key or self._references_parent(prop, parent_name):
                continue
            property_config = entity_config.get_property_config(prop.name)
            if (
                property_config is not None
                and property_config.has_fixed_values
                and not property_config.use_custom_strategy
            ):
                fixed.append(
                    PropertyWithFixedValues(prop.name, list(property_config.fixed_values))
                )

        if not fixed:
            return [Combination()]

        combinations = generate_all_combinations(fixed)
        logger.debug(
            f"'{entity.name}': {len(combinations)} fixed-value combinations "
            f"over {', '.join(p.property_name for p in fixed)}"
        )
        return combinations

    @staticmethod
    def _references_parent(prop: PropertySchema, parent_name: Optional[str]) -> bool:
        return (
            parent_name is not None
            and prop.is_foreign_key
            and (prop.foreign_key_target_entity or "").lower() == parent_name.lower()
        )

    def _generate_property(
        self,
        entity: EntitySchema,
        prop: PropertySchema,
        index: int,
        entity_config: EntityConfig,
        parent_name: Optional[str],
        combination: Combination,
        key_generator: KeyGenerator,
        context: _RunContext,
    ) -> Any:
        """Produce the value of one property, or _OMIT to leave it out."""
        property_config = entity_config.get_property_config(prop.name)
        is_registered_key = prop is entity.key_property

        if self._references_parent(prop, parent_name):
            parent_index = index // entity_config.records_per_parent
            if parent_index >= context.keys.count(parent_name):
                logger.debug(
                    f"'{entity.name}'[{index}].{prop.name}: parent index {parent_index} "
                    f"out of range, omitted"
                )
                return _OMIT
            value = context.keys.get_key(parent_name, parent_index)
            if is_registered_key:
                context.keys.add(entity.name, value)
            return value

        if prop.is_key and not prop.is_foreign_key:
            value = None
            if is_registered_key and key_generator.supports(prop):
                value = key_generator.generate(prop, index)
            if value is None:
                value = context.standard.generate_value(prop, index, property_config)
            if is_registered_key:
                context.keys.add(entity.name, value)
            return value

        if prop.name in combination.property_values:
            value = self._fixed_value(prop, combination.property_values[prop.name])
        elif property_config is not None and property_config.use_custom_strategy:
            value = context.standard.generate_value(prop, index, property_config)
        elif prop.is_foreign_key:
            value = self._resolve_foreign_key(entity, prop, index, entity_config, context)
        elif prop.is_enum:
            value = context.enums.select(prop, index, property_config)
            if value is None:
                value = context.standard.generate_value(prop, index, property_config)
        else:
            value = context.standard.generate_value(prop, index, property_config)

        if is_registered_key and value is not _OMIT:
            context.keys.add(entity.name, value)
        return value

    @staticmethod
    def _fixed_value(prop: PropertySchema, raw: str) -> Any:
        """Convert configured fixed-value text into a record value."""
        canonical = prop.canonical_type
        if canonical in ("String", "Char"):
            return raw
        if prop.is_enum and raw in prop.enum_values:
            return EnumValue(canonical, (raw,))
        return RawLiteral(raw)

    def _resolve_foreign_key(
        self,
        entity: EntitySchema,
        prop: PropertySchema,
        index: int,
        entity_config: EntityConfig,
        context: _RunContext,
    ) -> Any:
        """Resolve a foreign key that does not point at the configured parent."""
        target = context.resolve_name(prop.foreign_key_target_entity)
        if target is None:
            report_key = (entity.name, prop.name)
            if report_key not in context.reported:
                context.reported.add(report_key)
                message = (
                    f"{entity.name}.{prop.name} references unknown entity "
                    f"'{prop.foreign_key_target_entity}'; property omitted"
                )
                logger.warning(message)
                context.result.diagnostics.append(
                    Diagnostic(UNKNOWN_FK_TARGET, entity.name, message)
                )
            return _OMIT

        if target == entity.name:
            return self._resolve_self_reference(entity, prop, index, context)

        if not context.keys.has_keys(target):
            return context.standard.generate_value(prop, index, None)
        target_keys = context.keys.get(target)

        relationship_config = entity_config.get_relationship_config(target)
        if relationship_config is not None:
            parent_index = relationship_config.get_parent_index(index, len(target_keys))
        else:
            parent_index = index % len(target_keys)

        if parent_index is None:
            return _OMIT
        return target_keys[parent_index]

    @staticmethod
    def _resolve_self_reference(
        entity: EntitySchema, prop: PropertySchema, index: int, context: _RunContext
    ) -> Any:
        """
        Point record i at record (i - 1) // 2 of the same entity.

        This builds a balanced tree rooted at record 0, whose reference is
        null when the property allows it.
        """
        if index == 0 and prop.is_nullable:
            return None
        own_keys = context.keys.get(entity.name)
        target_index = max(0, (index - 1) // 2)
        if target_index < len(own_keys):
            return own_keys[target_index]
        return _OMIT
