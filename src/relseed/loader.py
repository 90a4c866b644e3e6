"""
Project file loading.

A project file describes the entity schemas and the seed configuration in
YAML or JSON::

    entities:
      - name: Author
        properties:
          - {name: Id, type: Guid, key: true}
          - {name: Name, type: string, max_length: 100, required: true}
      - name: Book
        properties:
          - {name: Id, type: int, key: true}
          - {name: AuthorId, type: Guid, foreign_key: Author}
          - {name: Genre, type: Genre, enum: [Fiction, Poetry, Science]}

    seed:
      Author:
        count: 3
      Book:
        parent: Author
        per_parent: 2
        properties:
          Genre: {strategy: Random}

Without a ``seed`` section every concrete entity gets ``DEFAULT_RECORD_COUNT``
records.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from relseed.exceptions import ProjectFileError
from relseed.models import (
    DeleteBehavior,
    EntitySchema,
    PropertySchema,
    RelationshipInfo,
    RelationshipType,
)
from relseed.seed_config import (
    CustomPropertyConfig,
    EntityConfig,
    EnumPropertyConfig,
    EnumValueStrategy,
    PropertyConfig,
    RelationshipConfig,
    RelationshipStrategy,
    SeedDataConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_RECORD_COUNT = 10

_ENUM_CONFIG_KEYS = {"strategy", "selected_values", "value_count", "combine_flags", "custom_mapping"}


@dataclass
class Project:
    """Entity schemas and seed configuration loaded from one file."""

    entities: list[EntitySchema] = field(default_factory=list)
    seed_config: SeedDataConfig = field(default_factory=SeedDataConfig)
    path: Optional[Path] = None

    def get_entity(self, name: str) -> Optional[EntitySchema]:
        lowered = name.lower()
        return next((e for e in self.entities if e.name.lower() == lowered), None)


def load_project(path: str | Path) -> Project:
    """
    Load a project file (YAML or JSON, chosen by extension).

    Args:
        path: Path to ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        Loaded project

    Raises:
        ProjectFileError: If the file is missing, unparsable or invalid

    Example:
        >>> project = load_project("seed.yaml")
        >>> [e.name for e in project.entities]
        ['Author', 'Book']
    """
    path = Path(path)
    if not path.exists():
        raise ProjectFileError(str(path), "file not found")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ProjectFileError(str(path), f"parse error: {e}") from e

    project = load_project_data(data, source=str(path))
    project.path = path
    logger.debug(f"Loaded {len(project.entities)} entities from {path}")
    return project


def load_project_data(data: Any, source: str = "<data>") -> Project:
    """
    Build a project from already-parsed data.

    Args:
        data: Mapping with ``entities`` and optional ``seed`` sections
        source: Name used in error messages

    Returns:
        Loaded project

    Raises:
        ProjectFileError: If the data is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("entities"), list):
        raise ProjectFileError(source, "expected a mapping with an 'entities' list")

    entities = load_entities(data["entities"], source)

    seed_section = data.get("seed")
    if seed_section is None:
        seed_config = SeedDataConfig(
            [
                EntityConfig(e.name, record_count=DEFAULT_RECORD_COUNT)
                for e in entities
                if not e.is_abstract
            ]
        )
    else:
        seed_config = load_seed_config(seed_section, source)

    return Project(entities=entities, seed_config=seed_config)


def load_entities(items: list[Any], source: str = "<data>") -> list[EntitySchema]:
    """
    Parse entity definitions.

    Raises:
        ProjectFileError: If an entity or property is missing required fields
    """
    entities = []
    for item in items:
        if not isinstance(item, dict) or not item.get("name"):
            raise ProjectFileError(source, f"entity without a name: {item!r}")

        name = str(item["name"])
        properties = [_load_property(name, p, source) for p in item.get("properties") or []]
        relationships = [
            _load_relationship(name, r, source) for r in item.get("relationships") or []
        ]
        entities.append(
            EntitySchema(
                name=name,
                properties=properties,
                namespace=item.get("namespace"),
                relationships=relationships,
                is_abstract=bool(item.get("abstract", False)),
                uses_inheritance=bool(item.get("base_type")),
                base_type_name=item.get("base_type"),
                table_name=item.get("table"),
                schema_name=item.get("schema"),
            )
        )
    return entities


def _load_property(entity_name: str, item: Any, source: str) -> PropertySchema:
    if not isinstance(item, dict) or not item.get("name") or not item.get("type"):
        raise ProjectFileError(
            source, f"property of '{entity_name}' needs 'name' and 'type': {item!r}"
        )

    type_name = str(item["type"])
    enum_values = [str(v) for v in item.get("enum") or []]
    foreign_key = item.get("foreign_key")
    nullable = item.get("nullable")
    if nullable is None:
        nullable = type_name.endswith("?") or type_name.startswith("Nullable<")

    return PropertySchema(
        name=str(item["name"]),
        type_name=type_name,
        full_type_name=item.get("full_type"),
        is_nullable=bool(nullable),
        is_required=bool(item.get("required", False)),
        is_key=bool(item.get("key", False)),
        is_foreign_key=bool(foreign_key),
        foreign_key_target_entity=str(foreign_key) if foreign_key else None,
        is_enum=bool(enum_values),
        enum_values=enum_values,
        is_enum_flags=bool(item.get("flags", False)),
        is_navigation_property=bool(item.get("navigation", False)),
        is_collection=bool(item.get("collection", False)),
        exclude_from_seed=bool(item.get("exclude", False)),
        min_value=item.get("min"),
        max_value=item.get("max"),
        max_length=item.get("max_length"),
        is_read_only=bool(item.get("read_only", False)),
    )


def _load_relationship(entity_name: str, item: Any, source: str) -> RelationshipInfo:
    if not isinstance(item, dict) or not item.get("target"):
        raise ProjectFileError(
            source, f"relationship of '{entity_name}' needs a 'target': {item!r}"
        )
    try:
        return RelationshipInfo(
            source_entity_name=entity_name,
            target_entity_name=str(item["target"]),
            relation_type=RelationshipType(item.get("type", RelationshipType.MANY_TO_ONE.value)),
            source_navigation_property_name=item.get("navigation"),
            target_navigation_property_name=item.get("inverse_navigation"),
            foreign_key_property_name=item.get("foreign_key"),
            principal_key_property_name=item.get("principal_key"),
            is_required=bool(item.get("required", False)),
            delete_behavior=DeleteBehavior(item.get("delete_behavior", DeleteBehavior.CASCADE.value)),
        )
    except ValueError as e:
        raise ProjectFileError(source, f"relationship of '{entity_name}': {e}") from e


def load_seed_config(section: Any, source: str = "<data>") -> SeedDataConfig:
    """
    Parse the ``seed`` section into a SeedDataConfig.

    Parent references are linked by entity name after all configs are read.

    Raises:
        ProjectFileError: If the section is malformed, names an unknown
            parent, or the parent links form a cycle
    """
    if not isinstance(section, dict):
        raise ProjectFileError(source, "'seed' must be a mapping of entity name to settings")

    configs: dict[str, EntityConfig] = {}
    parents: dict[str, str] = {}
    for entity_name, settings in section.items():
        settings = settings or {}
        if not isinstance(settings, dict):
            raise ProjectFileError(source, f"seed settings for '{entity_name}' must be a mapping")
        config = EntityConfig(
            entity_name=str(entity_name),
            record_count=int(settings.get("count", DEFAULT_RECORD_COUNT)),
            records_per_parent=int(settings.get("per_parent", 2)),
            is_selected=bool(settings.get("selected", True)),
            property_configs=[
                _load_property_config(str(name), options or {}, source)
                for name, options in (settings.get("properties") or {}).items()
            ],
            relationship_configs=[
                _load_relationship_config(str(name), options or {}, source)
                for name, options in (settings.get("relationships") or {}).items()
            ],
        )
        configs[config.entity_name.lower()] = config
        if settings.get("parent"):
            parents[config.entity_name.lower()] = str(settings["parent"])

    for child, parent_name in parents.items():
        parent = configs.get(parent_name.lower())
        if parent is None:
            raise ProjectFileError(
                source,
                f"'{configs[child].entity_name}' has unknown parent '{parent_name}' "
                f"(parents need their own seed entry)",
            )
        configs[child].parent = parent

    seed_config = SeedDataConfig(list(configs.values()))
    errors = seed_config.validate()
    if errors:
        raise ProjectFileError(source, "; ".join(errors))
    return seed_config


def _as_text(value: Any) -> str:
    """Fixed and custom values are literal text; YAML booleans become C# booleans."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _load_property_config(name: str, options: Any, source: str) -> PropertyConfig:
    if not isinstance(options, dict):
        raise ProjectFileError(source, f"settings for property '{name}' must be a mapping")

    exclude = bool(options.get("exclude", False))
    fixed = [_as_text(v) for v in options.get("fixed") or []]

    if "custom" in options:
        return CustomPropertyConfig(
            property_name=name,
            exclude_from_seed=exclude,
            fixed_values=fixed,
            value=_as_text(options["custom"]),
        )

    if _ENUM_CONFIG_KEYS & options.keys():
        try:
            strategy = EnumValueStrategy(options.get("strategy", EnumValueStrategy.USE_ALL.value))
        except ValueError as e:
            raise ProjectFileError(source, f"property '{name}': {e}") from e
        mapping = {
            int(index): [str(v) for v in value] if isinstance(value, list) else str(value)
            for index, value in (options.get("custom_mapping") or {}).items()
        }
        return EnumPropertyConfig(
            property_name=name,
            exclude_from_seed=exclude,
            fixed_values=fixed,
            strategy=strategy,
            selected_values=[str(v) for v in options.get("selected_values") or []],
            value_count=int(options.get("value_count", 1)),
            combine_flags=bool(options.get("combine_flags", False)),
            custom_mapping=mapping,
        )

    return PropertyConfig(property_name=name, exclude_from_seed=exclude, fixed_values=fixed)


def _load_relationship_config(name: str, options: Any, source: str) -> RelationshipConfig:
    if not isinstance(options, dict):
        raise ProjectFileError(source, f"settings for relationship '{name}' must be a mapping")
    try:
        strategy = RelationshipStrategy(options.get("strategy", RelationshipStrategy.ONE_TO_ONE.value))
    except ValueError as e:
        raise ProjectFileError(source, f"relationship '{name}': {e}") from e
    return RelationshipConfig(
        related_entity_name=name,
        strategy=strategy,
        parent_record_count=int(options.get("parent_record_count", 1)),
        children_per_parent=int(options.get("children_per_parent", 2)),
        custom_mapping={int(k): int(v) for k, v in (options.get("custom_mapping") or {}).items()},
    )
