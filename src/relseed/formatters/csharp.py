"""EF Core ``HasData`` seed code output."""

from __future__ import annotations

from typing import Optional

from relseed.config import OutputSettings
from relseed.formatters.base import RecordFormatter
from relseed.models import DEPENDENCY_CYCLE, EntityBlock, GenerationResult, SeedRecord
from relseed.providers.literals import format_literal


class _CodeWriter:
    """Collect lines at indentation levels."""

    def __init__(self, indent_unit: str, level: int = 0):
        self.indent_unit = indent_unit
        self.level = level
        self.lines: list[str] = []

    def line(self, text: str = "") -> None:
        self.lines.append(f"{self.indent_unit * self.level}{text}" if text else "")

    def open(self, text: str) -> None:
        """Write a header line followed by an opening brace."""
        self.line(text)
        self.line("{")
        self.level += 1

    def close(self, suffix: str = "") -> None:
        self.level -= 1
        self.line("}" + suffix)

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


class CSharpSeedFormatter(RecordFormatter):
    """
    Render records as ``modelBuilder.Entity<T>().HasData(...)`` calls.

    By default the output is a series of bare ``HasData`` calls meant to be
    pasted into ``OnModelCreating``. With
    ``insert_directly_into_on_model_creating`` off, the calls are wrapped in
    a static class (optionally inside a namespace), with one method for all
    entities or one per entity.

    Example output:
        // Author seed data
        modelBuilder.Entity<Author>().HasData(
            new Author
            {
                Id = 1,
                Name = "Ada"
            }
        );
    """

    def __init__(self, settings: Optional[OutputSettings] = None):
        self.settings = settings or OutputSettings()

    def render(self, result: GenerationResult) -> str:
        """Render a generation result as C# source text."""
        if self.settings.insert_directly_into_on_model_creating:
            writer = _CodeWriter(self.settings.indent_unit)
            self._write_body(writer, result)
            return writer.text()
        return self._render_wrapped(result)

    def render_block(self, block: EntityBlock) -> str:
        """Render a single entity block."""
        writer = _CodeWriter(self.settings.indent_unit)
        self._write_block(writer, block)
        return writer.text()

    def _write_body(self, writer: _CodeWriter, result: GenerationResult) -> None:
        self._write_warnings(writer, result)
        for i, block in enumerate(result.blocks):
            if i > 0:
                writer.line()
            self._write_block(writer, block)

    def _write_warnings(self, writer: _CodeWriter, result: GenerationResult) -> None:
        if not self.settings.include_comments:
            return
        cycles = [d for d in result.diagnostics if d.kind == DEPENDENCY_CYCLE]
        for diagnostic in cycles:
            writer.line(f"// WARNING: {diagnostic.message}")
        if cycles:
            writer.line()

    def _write_block(self, writer: _CodeWriter, block: EntityBlock) -> None:
        builder = self.settings.model_builder_name
        if self.settings.include_comments:
            writer.line(f"// {block.entity_name} seed data")
        writer.line(f"{builder}.Entity<{block.entity_name}>().HasData(")
        writer.level += 1

        if block.is_placeholder:
            writer.line(f"// {block.placeholder}")
        else:
            last = len(block.records) - 1
            for i, record in enumerate(block.records):
                self._write_record(writer, record, block, trailing="," if i < last else "")

        writer.level -= 1
        writer.line(");")

    def _write_record(
        self, writer: _CodeWriter, record: SeedRecord, block: EntityBlock, trailing: str
    ) -> None:
        writer.open(f"new {record.entity_name}")
        assignments = [
            f"{name} = {format_literal(value, block.property_types.get(name))}"
            for name, value in record.values.items()
        ]
        for i, assignment in enumerate(assignments):
            writer.line(assignment + ("," if i < len(assignments) - 1 else ""))
        writer.close(trailing)

    def _render_wrapped(self, result: GenerationResult) -> str:
        settings = self.settings
        writer = _CodeWriter(settings.indent_unit)

        writer.line("using Microsoft.EntityFrameworkCore;")
        writer.line()
        if settings.namespace:
            writer.open(f"namespace {settings.namespace}")

        writer.open(f"public static class {settings.generated_class_name}")

        this = "this " if settings.implement_as_extension_method else ""
        builder = settings.model_builder_name
        writer.open(
            f"public static void {settings.generated_method_name}"
            f"({this}ModelBuilder {builder})"
        )

        if settings.generate_separate_methods_per_entity:
            self._write_warnings(writer, result)
            for block in result.blocks:
                writer.line(f"{self._entity_method_name(block)}({builder});")
            writer.close()
            for block in result.blocks:
                writer.line()
                writer.open(
                    f"private static void {self._entity_method_name(block)}"
                    f"(ModelBuilder {builder})"
                )
                self._write_block(writer, block)
                writer.close()
        else:
            self._write_body(writer, result)
            writer.close()

        writer.close()
        if settings.namespace:
            writer.close()
        return writer.text()

    def _entity_method_name(self, block: EntityBlock) -> str:
        return f"{self.settings.generated_method_name}{block.entity_name}"
