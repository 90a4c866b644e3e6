"""
Configuration management for relseed.

Loads and validates generation and output settings from relseed.toml files
using Pydantic.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE_NAME = "relseed.toml"


def _toml_string(value: str) -> str:
    """Quote a value as a TOML basic string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f'"{escaped}"'


class GenerationSettings(BaseSettings):
    """Value generation settings."""

    model_config = SettingsConfigDict(env_prefix="RELSEED_GENERATION_")

    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the random source (None = different data every run)",
    )
    null_probability: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Probability of null for nullable, non-required properties",
    )
    guid_salt: str = Field(
        default="",
        description="Extra input mixed into deterministic GUID keys",
    )
    locale: str = Field(default="en_US", description="Faker locale for semantic strings")


class OutputSettings(BaseSettings):
    """Output formatting settings. These never affect generated values."""

    model_config = SettingsConfigDict(env_prefix="RELSEED_OUTPUT_")

    include_comments: bool = Field(default=True, description="Emit explanatory comments")
    use_tabs: bool = Field(default=False, description="Indent with tabs instead of spaces")
    indent_size: int = Field(default=4, ge=1, description="Spaces per indentation level")
    insert_directly_into_on_model_creating: bool = Field(
        default=True,
        description="Emit bare HasData calls for pasting into OnModelCreating",
    )
    generate_separate_methods_per_entity: bool = Field(
        default=False, description="Emit one seed method per entity"
    )
    implement_as_extension_method: bool = Field(
        default=False, description="Emit seed methods as ModelBuilder extension methods"
    )
    generated_class_name: str = Field(default="DbSeedData", description="Wrapper class name")
    generated_method_name: str = Field(default="SeedData", description="Seed method name")
    namespace: Optional[str] = Field(default=None, description="Wrapper class namespace")
    model_builder_name: str = Field(
        default="modelBuilder", description="Variable holding the ModelBuilder"
    )

    @property
    def indent_unit(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size


class Config(BaseSettings):
    """Main configuration for relseed."""

    model_config = SettingsConfigDict(env_prefix="RELSEED_")

    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to relseed.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from relseed.toml.

        Searches for relseed.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        while True:
            config_path = current / CONFIG_FILE_NAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILE_NAME} found in {start_dir} or parent directories. "
            f"Run 'relseed init' to create one."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write relseed.toml
        """
        config_path = Path(path)
        gen = self.generation
        out = self.output

        # Optional values are written commented out (TOML has no null)
        seed_line = (
            f"random_seed = {gen.random_seed}"
            if gen.random_seed is not None
            else "# random_seed = 42"
        )
        namespace_line = (
            f"namespace = {_toml_string(out.namespace)}"
            if out.namespace
            else '# namespace = "MyApp.Data"'
        )

        toml_content = f"""# relseed configuration

[generation]
{seed_line}
null_probability = {gen.null_probability}
guid_salt = {_toml_string(gen.guid_salt)}
locale = {_toml_string(gen.locale)}

[output]
include_comments = {str(out.include_comments).lower()}
use_tabs = {str(out.use_tabs).lower()}
indent_size = {out.indent_size}
insert_directly_into_on_model_creating = {str(out.insert_directly_into_on_model_creating).lower()}
generate_separate_methods_per_entity = {str(out.generate_separate_methods_per_entity).lower()}
implement_as_extension_method = {str(out.implement_as_extension_method).lower()}
generated_class_name = {_toml_string(out.generated_class_name)}
generated_method_name = {_toml_string(out.generated_method_name)}
{namespace_line}
model_builder_name = {_toml_string(out.model_builder_name)}
"""

        config_path.write_text(toml_content, encoding="utf-8")

