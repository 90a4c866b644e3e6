"""SeedBuilder API for declarative seed generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from relseed.config import Config
from relseed.exceptions import UnknownEntityError
from relseed.formatters import RecordFormatter
from relseed.loader import load_project
from relseed.models import EntitySchema, GenerationResult, Seeds
from relseed.orchestrator import SeedDataGenerator
from relseed.seed_config import (
    CustomPropertyConfig,
    EntityConfig,
    EnumPropertyConfig,
    EnumValueStrategy,
    PropertyConfig,
    RelationshipConfig,
    SeedDataConfig,
)


class SeedBuilder:
    """
    Declarative API for building and executing seed plans in code.

    Example:
        >>> seeds = (
        ...     SeedBuilder(entities)
        ...     .add("Author", count=3)
        ...     .add("Book", parent="Author", per_parent=2,
        ...          fixed={"Genre": ["Fiction", "Poetry"]})
        ...     .execute()
        ... )
        >>> len(seeds.Book)
        6
        >>> seeds.Book[0].AuthorId == seeds.Author[0].Id
        True
    """

    def __init__(self, entities: list[EntitySchema], settings: Optional[Config] = None):
        """
        Initialize SeedBuilder.

        Args:
            entities: Entity schemas in declaration order
            settings: Generation and output settings (defaults to Config())
        """
        self.entities = entities
        self.settings = settings or Config()
        self._plan: list[EntityConfig] = []

    @classmethod
    def from_project(cls, path: str | Path, settings: Optional[Config] = None) -> SeedBuilder:
        """
        Create a builder over the entities of a project file.

        The file's own seed section is ignored; the plan starts empty.

        Raises:
            ProjectFileError: If the project file cannot be loaded
        """
        return cls(load_project(path).entities, settings)

    def _entity(self, name: str) -> EntitySchema:
        lowered = name.lower()
        for entity in self.entities:
            if entity.name.lower() == lowered:
                return entity
        raise UnknownEntityError(name, [e.name for e in self.entities])

    def _planned(self, name: str) -> Optional[EntityConfig]:
        lowered = name.lower()
        return next((c for c in self._plan if c.entity_name.lower() == lowered), None)

    def add(
        self,
        entity: str,
        count: int = 10,
        parent: Optional[str] = None,
        per_parent: int = 2,
        fixed: Optional[dict[str, list[Any]]] = None,
        custom: Optional[dict[str, str]] = None,
        enums: Optional[dict[str, Union[str, EnumValueStrategy, EnumPropertyConfig]]] = None,
        exclude: Optional[list[str]] = None,
        relationships: Optional[list[RelationshipConfig]] = None,
    ) -> SeedBuilder:
        """
        Add an entity to the seed plan.

        Args:
            entity: Entity name
            count: Number of records (ignored when a parent is given)
            parent: Parent entity, already added to the plan
            per_parent: Records generated per parent record
            fixed: Property -> fixed values; every combination gets records
            custom: Property -> literal emitted verbatim
            enums: Property -> enum strategy (name) or full EnumPropertyConfig
            exclude: Properties left out of the records
            relationships: Mapping strategies for other foreign keys

        Returns:
            Self for chaining

        Raises:
            UnknownEntityError: If the entity is not in the schema
            ValueError: If the parent has not been added yet
        """
        schema = self._entity(entity)

        parent_config = None
        if parent is not None:
            self._entity(parent)
            parent_config = self._planned(parent)
            if parent_config is None:
                raise ValueError(
                    f"Parent '{parent}' of '{schema.name}' is not in the seed plan. "
                    f"Add it before its children."
                )

        config = EntityConfig(
            entity_name=schema.name,
            record_count=count,
            records_per_parent=per_parent,
            parent=parent_config,
            relationship_configs=list(relationships or []),
        )

        for name, values in (fixed or {}).items():
            config.set_property_config(
                PropertyConfig(property_name=name, fixed_values=[str(v) for v in values])
            )
        for name, value in (custom or {}).items():
            config.set_property_config(CustomPropertyConfig(property_name=name, value=value))
        for name, strategy in (enums or {}).items():
            if isinstance(strategy, EnumPropertyConfig):
                config.set_property_config(strategy)
            else:
                config.set_property_config(
                    EnumPropertyConfig(property_name=name, strategy=EnumValueStrategy(strategy))
                )
        for name in exclude or []:
            config.set_property_config(PropertyConfig(property_name=name, exclude_from_seed=True))

        existing = self._planned(schema.name)
        if existing is not None:
            self._plan.remove(existing)
        self._plan.append(config)
        return self

    def build_config(self) -> SeedDataConfig:
        """Get the seed configuration for the current plan."""
        return SeedDataConfig(list(self._plan))

    def build(self) -> GenerationResult:
        """Generate typed records for the plan."""
        return SeedDataGenerator(self.settings).build(self.entities, self.build_config())

    def execute(self) -> Seeds:
        """
        Execute the seed plan and return generated data.

        Returns:
            Seeds object with generated records accessible by entity name
        """
        return Seeds.from_result(self.build())

    def render(self, formatter: Optional[RecordFormatter] = None) -> str:
        """
        Execute the plan and render it.

        Args:
            formatter: Output formatter (defaults to C# HasData output)

        Returns:
            Rendered output text
        """
        generator = SeedDataGenerator(self.settings, formatter)
        return generator.generate(self.entities, self.build_config())
