"""Pytest configuration and shared fixtures."""

import pytest

from relseed.config import Config, GenerationSettings
from relseed.models import EntitySchema, PropertySchema
from relseed.providers import RandomDataProvider
from relseed.seed_config import EntityConfig, SeedDataConfig

GENRES = ["Fiction", "Poetry", "Science"]


@pytest.fixture
def author_entity() -> EntitySchema:
    """Author with a GUID key and a collection navigation."""
    return EntitySchema(
        "Author",
        properties=[
            PropertySchema("Id", "Guid", is_key=True),
            PropertySchema("FullName", "string", max_length=80, is_required=True),
            PropertySchema("Books", "ICollection<Book>", is_collection=True),
        ],
    )


@pytest.fixture
def book_entity() -> EntitySchema:
    """Book referencing Author, with an integer key and an enum."""
    return EntitySchema(
        "Book",
        properties=[
            PropertySchema("Id", "int", is_key=True),
            PropertySchema("Title", "string", max_length=120, is_required=True),
            PropertySchema(
                "AuthorId", "Guid", is_foreign_key=True, foreign_key_target_entity="Author"
            ),
            PropertySchema("Genre", "Genre", is_enum=True, enum_values=list(GENRES)),
            PropertySchema("Author", "Author", is_navigation_property=True),
        ],
    )


@pytest.fixture
def library_entities(author_entity, book_entity) -> list[EntitySchema]:
    """
    Author/Book schema.

    Book is declared first so ordering has to come from the foreign key.
    """
    return [book_entity, author_entity]


@pytest.fixture
def library_config() -> SeedDataConfig:
    """Three authors with two books each."""
    author = EntityConfig("Author", record_count=3)
    book = EntityConfig("Book", records_per_parent=2, parent=author)
    return SeedDataConfig([author, book])


@pytest.fixture
def seeded_settings() -> Config:
    """Settings with a fixed random seed."""
    return Config(generation=GenerationSettings(random_seed=42))


@pytest.fixture
def provider() -> RandomDataProvider:
    """Seeded random data provider."""
    return RandomDataProvider(seed=1234)


LIBRARY_YAML = """
entities:
  - name: Book
    properties:
      - {name: Id, type: int, key: true}
      - {name: Title, type: string, max_length: 120, required: true}
      - {name: AuthorId, type: Guid, foreign_key: Author}
      - {name: Genre, type: Genre, enum: [Fiction, Poetry, Science]}
      - {name: Author, type: Author, navigation: true}
  - name: Author
    properties:
      - {name: Id, type: Guid, key: true}
      - {name: FullName, type: string, max_length: 80, required: true}

seed:
  Author:
    count: 3
  Book:
    parent: Author
    per_parent: 2
"""


@pytest.fixture
def project_file(tmp_path):
    """Library project written as YAML."""
    path = tmp_path / "library.yaml"
    path.write_text(LIBRARY_YAML, encoding="utf-8")
    return path
