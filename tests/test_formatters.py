"""Tests for output formatters."""

import json
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from relseed.config import OutputSettings
from relseed.formatters import CSharpSeedFormatter, JsonRecordFormatter, to_plain_value
from relseed.models import (
    DEPENDENCY_CYCLE,
    MISSING_PARENT_KEYS,
    Diagnostic,
    EntityBlock,
    EnumValue,
    GenerationResult,
    RawLiteral,
    SeedRecord,
)


@pytest.fixture
def author_block() -> EntityBlock:
    return EntityBlock(
        "Author",
        records=[
            SeedRecord("Author", 0, {"Id": 1, "Name": "Ada"}),
            SeedRecord("Author", 1, {"Id": 2, "Name": "Bob"}),
        ],
        property_types={"Id": "int", "Name": "string"},
    )


@pytest.fixture
def result(author_block) -> GenerationResult:
    book_block = EntityBlock(
        "Book",
        records=[SeedRecord("Book", 0, {"Id": 1, "Price": Decimal("9.99"), "Rating": 4.5})],
        property_types={"Id": "int", "Price": "decimal", "Rating": "float"},
    )
    return GenerationResult(blocks=[author_block, book_block], order=["Author", "Book"])


class TestCSharpSeedFormatter:
    """Tests for CSharpSeedFormatter."""

    def test_block_layout(self, author_block) -> None:
        """Test a block renders as one HasData call with object initializers."""
        text = CSharpSeedFormatter().render(GenerationResult(blocks=[author_block]))

        assert text == (
            "// Author seed data\n"
            "modelBuilder.Entity<Author>().HasData(\n"
            "    new Author\n"
            "    {\n"
            "        Id = 1,\n"
            '        Name = "Ada"\n'
            "    },\n"
            "    new Author\n"
            "    {\n"
            "        Id = 2,\n"
            '        Name = "Bob"\n'
            "    }\n"
            ");\n"
        )

    def test_blocks_separated_by_blank_line(self, result) -> None:
        """Test consecutive blocks are separated by one blank line."""
        text = CSharpSeedFormatter().render(result)

        assert ");\n\n// Book seed data\n" in text

    def test_literals_use_declared_types(self, result) -> None:
        """Test declared types choose literal suffixes."""
        text = CSharpSeedFormatter().render(result)

        assert "Price = 9.99m," in text
        assert "Rating = 4.5f" in text

    def test_tabs_and_no_comments(self, author_block) -> None:
        """Test indentation and comment settings."""
        settings = OutputSettings(use_tabs=True, include_comments=False)

        text = CSharpSeedFormatter(settings).render(GenerationResult(blocks=[author_block]))

        assert text.startswith("modelBuilder.Entity<Author>().HasData(\n\tnew Author\n")
        assert "//" not in text

    def test_custom_model_builder_name(self, author_block) -> None:
        """Test the ModelBuilder variable name is configurable."""
        settings = OutputSettings(model_builder_name="builder")

        text = CSharpSeedFormatter(settings).render_block(author_block)

        assert "builder.Entity<Author>().HasData(" in text

    def test_placeholder_block(self) -> None:
        """Test placeholder blocks keep the HasData frame."""
        block = EntityBlock("Book", placeholder="Parent entity 'Author' has no generated records")

        text = CSharpSeedFormatter().render_block(block)

        assert text == (
            "// Book seed data\n"
            "modelBuilder.Entity<Book>().HasData(\n"
            "    // Parent entity 'Author' has no generated records\n"
            ");\n"
        )

    def test_cycle_warning(self, author_block) -> None:
        """Test cycle diagnostics are written as warnings before the blocks."""
        result = GenerationResult(
            blocks=[author_block],
            diagnostics=[
                Diagnostic(DEPENDENCY_CYCLE, "A", "Circular dependency A -> B -> A"),
                Diagnostic(MISSING_PARENT_KEYS, "C", "not a warning"),
            ],
        )

        text = CSharpSeedFormatter().render(result)

        assert text.startswith("// WARNING: Circular dependency A -> B -> A\n\n// Author")
        assert "not a warning" not in text

    def test_wrapped_in_class(self, result) -> None:
        """Test wrapper mode emits a static class in a namespace."""
        settings = OutputSettings(
            insert_directly_into_on_model_creating=False, namespace="Library.Data"
        )

        text = CSharpSeedFormatter(settings).render(result)

        assert text.startswith("using Microsoft.EntityFrameworkCore;\n\nnamespace Library.Data\n{\n")
        assert "    public static class DbSeedData\n" in text
        assert "        public static void SeedData(ModelBuilder modelBuilder)\n" in text
        assert "            modelBuilder.Entity<Author>().HasData(\n" in text
        assert text.endswith("        }\n    }\n}\n")

    def test_extension_method(self, result) -> None:
        """Test extension-method wrappers take `this ModelBuilder`."""
        settings = OutputSettings(
            insert_directly_into_on_model_creating=False, implement_as_extension_method=True
        )

        text = CSharpSeedFormatter(settings).render(result)

        assert "public static void SeedData(this ModelBuilder modelBuilder)" in text
        assert "namespace" not in text

    def test_separate_methods_per_entity(self, result) -> None:
        """Test one private method per entity, called from the main method."""
        settings = OutputSettings(
            insert_directly_into_on_model_creating=False,
            generate_separate_methods_per_entity=True,
        )

        text = CSharpSeedFormatter(settings).render(result)

        assert "SeedDataAuthor(modelBuilder);\n" in text
        assert "SeedDataBook(modelBuilder);\n" in text
        assert "private static void SeedDataAuthor(ModelBuilder modelBuilder)" in text
        assert "private static void SeedDataBook(ModelBuilder modelBuilder)" in text


class TestJsonRecordFormatter:
    """Tests for JsonRecordFormatter."""

    def test_document(self, result) -> None:
        """Test records, order and diagnostics are serialized."""
        result.blocks.append(EntityBlock("Review", placeholder="no parents"))
        result.diagnostics.append(Diagnostic(MISSING_PARENT_KEYS, "Review", "no parents"))

        document = json.loads(JsonRecordFormatter().render(result))

        assert document["order"] == ["Author", "Book"]
        assert document["entities"]["Author"] == [
            {"Id": 1, "Name": "Ada"},
            {"Id": 2, "Name": "Bob"},
        ]
        assert document["entities"]["Book"][0]["Price"] == "9.99"
        assert document["placeholders"] == {"Review": "no parents"}
        assert document["diagnostics"] == [
            {"kind": "missing_parent_keys", "entity": "Review", "message": "no parents"}
        ]

    def test_non_ascii_kept(self) -> None:
        """Test non-ASCII text is not escaped."""
        block = EntityBlock("Author", records=[SeedRecord("Author", 0, {"Name": "Zoë"})])

        assert "Zoë" in JsonRecordFormatter().render(GenerationResult(blocks=[block]))


class TestToPlainValue:
    """Tests for to_plain_value()."""

    def test_scalars_pass_through(self) -> None:
        """Test JSON-native values are unchanged."""
        assert to_plain_value(None) is None
        assert to_plain_value(True) is True
        assert to_plain_value(3) == 3
        assert to_plain_value("x") == "x"

    def test_typed_values(self) -> None:
        """Test typed values become JSON-compatible values."""
        guid = uuid.UUID(int=1)

        assert to_plain_value(Decimal("1.50")) == "1.50"
        assert to_plain_value(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert to_plain_value(timedelta(minutes=2)) == 120.0
        assert to_plain_value(guid) == str(guid)
        assert to_plain_value(b"\x00\x01") == "AAE="
        assert to_plain_value(RawLiteral("DateTime.UtcNow")) == "DateTime.UtcNow"

    def test_enum_values(self) -> None:
        """Test enums become member names."""
        assert to_plain_value(EnumValue("Genre", ("Poetry",))) == "Poetry"
        assert to_plain_value(EnumValue("Access", ("Read", "Write"))) == ["Read", "Write"]
