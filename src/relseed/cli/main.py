"""CLI commands for relseed."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from relseed.config import CONFIG_FILE_NAME, Config
from relseed.exceptions import RelseedError
from relseed.formatters import CSharpSeedFormatter, JsonRecordFormatter
from relseed.loader import load_project
from relseed.orchestrator import SeedDataGenerator


def _load_settings(config_path: Optional[str], project_path: Path) -> Config:
    if config_path:
        return Config.from_toml(config_path)
    try:
        return Config.find_and_load(project_path.parent)
    except FileNotFoundError:
        return Config()


@click.group()
@click.version_option(package_name="relseed")
def cli() -> None:
    """relseed - dependency-ordered seed data for relational entities."""
    pass


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help=f"Settings file (default: nearest {CONFIG_FILE_NAME})")
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.option("--format", "output_format", type=click.Choice(["csharp", "json"]),
              default="csharp", show_default=True, help="Output format")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def generate(
    project: str,
    config_path: Optional[str],
    seed: Optional[int],
    output_format: str,
    output: Optional[str],
    verbose: bool,
) -> None:
    """Generate seed data for a project file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    project_path = Path(project)
    try:
        settings = _load_settings(config_path, project_path)
        loaded = load_project(project_path)
    except (RelseedError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if seed is not None:
        settings.generation.random_seed = seed

    if output_format == "json":
        formatter = JsonRecordFormatter()
    else:
        formatter = CSharpSeedFormatter(settings.output)

    generator = SeedDataGenerator(settings, formatter)
    text = generator.generate(loaded.entities, loaded.seed_config)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"✓ Wrote {output}")
    else:
        click.echo(text, nl=False)


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False))
def order(project: str) -> None:
    """Show the order in which entities are generated."""
    try:
        loaded = load_project(project)
    except RelseedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    resolved = SeedDataGenerator().resolve_order(loaded.entities, loaded.seed_config)
    for position, name in enumerate(resolved.order, start=1):
        click.echo(f"{position}. {name}")
    for cycle in resolved.cycles:
        click.echo(f"⚠ Circular dependency: {' -> '.join(cycle)}", err=True)


@cli.command()
@click.option("--path", "directory", type=click.Path(file_okay=False), default=".",
              help="Directory to create the settings file in")
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
def init(directory: str, force: bool) -> None:
    """Create a relseed.toml with default settings."""
    target = Path(directory) / CONFIG_FILE_NAME
    if target.exists() and not force:
        click.echo(f"Error: {target} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    target.parent.mkdir(parents=True, exist_ok=True)
    Config().to_toml(target)
    click.echo(f"✓ Created {target}")


if __name__ == "__main__":
    cli()
