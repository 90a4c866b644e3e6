"""Tests for the SeedBuilder API."""

import csv
import json

import pytest

from relseed import SeedBuilder
from relseed.exceptions import UnknownEntityError
from relseed.formatters import JsonRecordFormatter
from relseed.seed_config import EnumPropertyConfig, EnumValueStrategy


def test_parent_child_plan(library_entities, seeded_settings):
    """Books fan out from authors and reference them by key."""
    seeds = (
        SeedBuilder(library_entities, seeded_settings)
        .add("Author", count=3)
        .add("Book", parent="Author", per_parent=2)
        .execute()
    )

    assert len(seeds.Author) == 3
    assert len(seeds.Book) == 6
    assert seeds.Book[0].AuthorId == seeds.Author[0].Id
    assert seeds.Book[5].AuthorId == seeds.Author[2].Id
    assert seeds.entity_names == ["Author", "Book"]
    assert seeds["Book"] is seeds.Book


def test_unknown_entity():
    """Adding an entity missing from the schema raises UnknownEntityError."""
    with pytest.raises(UnknownEntityError, match="Available entities"):
        SeedBuilder([]).add("Ghost")


def test_parent_must_be_planned(library_entities):
    """A parent has to be added before its children."""
    with pytest.raises(ValueError, match="not in the seed plan"):
        SeedBuilder(library_entities).add("Book", parent="Author")


def test_re_adding_replaces(library_entities):
    """Adding the same entity twice keeps the last plan."""
    builder = SeedBuilder(library_entities).add("Author", count=3).add("author", count=1)

    assert len(builder.execute().Author) == 1


def test_fixed_custom_and_exclude(library_entities):
    """Fixed, custom and excluded properties are applied."""
    seeds = (
        SeedBuilder(library_entities)
        .add("Author", count=1, exclude=["FullName"])
        .add(
            "Book",
            parent="Author",
            per_parent=2,
            fixed={"Genre": ["Poetry"]},
            custom={"Title": '"Untitled"'},
        )
        .execute()
    )

    assert all(b.Genre.members == ("Poetry",) for b in seeds.Book)
    assert seeds.Book[0].Title.text == '"Untitled"'
    with pytest.raises(AttributeError):
        seeds.Author[0].FullName


def test_enum_strategies(library_entities):
    """Enum strategies are accepted by name or as a full config."""
    seeds = (
        SeedBuilder(library_entities)
        .add("Author", count=2)
        .add("Book", parent="Author", per_parent=3, enums={"Genre": "Random"})
        .execute()
    )
    specific = (
        SeedBuilder(library_entities)
        .add("Author", count=1)
        .add(
            "Book",
            parent="Author",
            enums={
                "Genre": EnumPropertyConfig(
                    "Genre",
                    strategy=EnumValueStrategy.USE_SPECIFIC,
                    selected_values=["Science"],
                )
            },
        )
        .execute()
    )

    assert all(b.Genre.members[0] in ("Fiction", "Poetry", "Science") for b in seeds.Book)
    assert {b.Genre.members for b in specific.Book} == {("Science",)}


def test_render_csharp_and_json(library_entities, seeded_settings):
    """Plans render with the default or a given formatter."""
    builder = (
        SeedBuilder(library_entities, seeded_settings)
        .add("Author", count=1)
        .add("Book", parent="Author", per_parent=1)
    )

    text = builder.render()
    document = json.loads(builder.render(JsonRecordFormatter()))

    assert text.index("Entity<Author>") < text.index("Entity<Book>")
    assert list(document["entities"]) == ["Author", "Book"]


def test_build_config(library_entities):
    """The plan is exposed as a seed configuration."""
    config = (
        SeedBuilder(library_entities)
        .add("Author", count=3)
        .add("Book", parent="Author", per_parent=4)
        .build_config()
    )

    assert config.get_entity_config("Book").total_record_count == 12


def test_from_project_ignores_seed_section(project_file):
    """Builders from a project file start with an empty plan."""
    builder = SeedBuilder.from_project(project_file)

    assert builder.build().blocks == []
    assert [e.name for e in builder.entities] == ["Book", "Author"]


def test_export_json_and_csv(library_entities, tmp_path):
    """Seeds export to JSON and CSV files."""
    seeds = (
        SeedBuilder(library_entities)
        .add("Author", count=2)
        .add("Book", parent="Author", per_parent=1)
        .execute()
    )

    text = seeds.to_json(tmp_path / "seeds.json")
    seeds.to_csv("Book", tmp_path / "books.csv")

    document = json.loads((tmp_path / "seeds.json").read_text(encoding="utf-8"))
    assert json.loads(text) == document
    assert document["Book"][0]["AuthorId"] == str(seeds.Author[0].Id)
    assert document["Book"][0]["Genre"] == "Fiction"

    with open(tmp_path / "books.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert rows[1]["Id"] == "2"
    assert rows[1]["AuthorId"] == str(seeds.Author[1].Id)
