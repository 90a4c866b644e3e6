"""relseed - dependency-ordered seed data generation for relational entities."""

from relseed.builder import SeedBuilder
from relseed.config import Config, GenerationSettings, OutputSettings
from relseed.dependency import DependencyOrder, resolve_dependency_order
from relseed.exceptions import (
    ParentCycleError,
    ProjectFileError,
    RelseedError,
    UnknownEntityError,
)
from relseed.formatters import CSharpSeedFormatter, JsonRecordFormatter, RecordFormatter
from relseed.generators import deterministic_guid, generate_all_combinations
from relseed.loader import load_project
from relseed.models import (
    EntitySchema,
    GenerationResult,
    PropertySchema,
    RelationshipInfo,
    Seeds,
)
from relseed.orchestrator import SeedDataGenerator
from relseed.seed_config import (
    CustomPropertyConfig,
    EntityConfig,
    EnumPropertyConfig,
    EnumValueStrategy,
    PropertyConfig,
    RelationshipConfig,
    RelationshipStrategy,
    SeedDataConfig,
    compute_total_record_count,
)

__version__ = "0.1.0"

__all__ = [
    "CSharpSeedFormatter",
    "Config",
    "CustomPropertyConfig",
    "DependencyOrder",
    "EntityConfig",
    "EntitySchema",
    "EnumPropertyConfig",
    "EnumValueStrategy",
    "GenerationResult",
    "GenerationSettings",
    "JsonRecordFormatter",
    "OutputSettings",
    "ParentCycleError",
    "ProjectFileError",
    "PropertyConfig",
    "PropertySchema",
    "RecordFormatter",
    "RelationshipConfig",
    "RelationshipInfo",
    "RelationshipStrategy",
    "RelseedError",
    "SeedBuilder",
    "SeedDataConfig",
    "SeedDataGenerator",
    "Seeds",
    "UnknownEntityError",
    "compute_total_record_count",
    "deterministic_guid",
    "generate_all_combinations",
    "load_project",
    "resolve_dependency_order",
]
