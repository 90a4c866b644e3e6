"""Tests for the relseed command-line interface."""

import json

from click.testing import CliRunner

from relseed.cli.main import cli
from relseed.config import CONFIG_FILE_NAME


class TestGenerateCommand:
    """Tests for `relseed generate`."""

    def test_csharp_output(self, project_file) -> None:
        """Test C# output is printed in dependency order."""
        result = CliRunner().invoke(cli, ["generate", str(project_file), "--seed", "1"])

        assert result.exit_code == 0
        assert "modelBuilder.Entity<Author>().HasData(" in result.output
        assert result.output.index("Entity<Author>") < result.output.index("Entity<Book>")

    def test_seed_is_reproducible(self, project_file) -> None:
        """Test the same seed prints the same output."""
        runner = CliRunner()

        first = runner.invoke(cli, ["generate", str(project_file), "--seed", "3"])
        second = runner.invoke(cli, ["generate", str(project_file), "--seed", "3"])

        assert first.stdout == second.stdout

    def test_json_output(self, project_file) -> None:
        """Test JSON output contains the records."""
        result = CliRunner().invoke(cli, ["generate", str(project_file), "--format", "json"])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["order"] == ["Author", "Book"]
        assert len(document["entities"]["Book"]) == 6

    def test_output_file(self, project_file, tmp_path) -> None:
        """Test --output writes the file and reports it."""
        target = tmp_path / "Seed.cs"

        result = CliRunner().invoke(cli, ["generate", str(project_file), "-o", str(target)])

        assert result.exit_code == 0
        assert "✓ Wrote" in result.output
        assert "HasData(" in target.read_text(encoding="utf-8")

    def test_settings_file_is_used(self, project_file, tmp_path) -> None:
        """Test a relseed.toml next to the project changes the output."""
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "[output]\ninclude_comments = false\nmodel_builder_name = \"builder\"\n"
        )

        result = CliRunner().invoke(cli, ["generate", str(project_file)])

        assert result.exit_code == 0
        assert "builder.Entity<Author>().HasData(" in result.output
        assert "// Author seed data" not in result.output

    def test_invalid_project(self, tmp_path) -> None:
        """Test an invalid project file exits with an error."""
        path = tmp_path / "bad.yaml"
        path.write_text("entities: 5\n")

        result = CliRunner().invoke(cli, ["generate", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestOrderCommand:
    """Tests for `relseed order`."""

    def test_order(self, project_file) -> None:
        """Test the generation order is listed."""
        result = CliRunner().invoke(cli, ["order", str(project_file)])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["1. Author", "2. Book"]

    def test_parent_names_match_in_any_case(self, tmp_path) -> None:
        """Test seed names spelled in another case still order parents first."""
        path = tmp_path / "rooms.yaml"
        path.write_text(
            "entities:\n"
            "  - name: Shelf\n"
            "    properties:\n"
            "      - {name: Id, type: int, key: true}\n"
            "  - name: Room\n"
            "    properties:\n"
            "      - {name: Id, type: int, key: true}\n"
            "seed:\n"
            "  room:\n"
            "    count: 1\n"
            "  shelf:\n"
            "    parent: room\n"
            "    per_parent: 2\n"
        )
        runner = CliRunner()

        ordered = runner.invoke(cli, ["order", str(path)])
        generated = runner.invoke(cli, ["generate", str(path), "--format", "json"])

        assert ordered.exit_code == 0
        assert ordered.output.splitlines() == ["1. Room", "2. Shelf"]
        assert json.loads(generated.stdout)["order"] == ["Room", "Shelf"]


class TestInitCommand:
    """Tests for `relseed init`."""

    def test_creates_settings_file(self, tmp_path) -> None:
        """Test init writes a relseed.toml."""
        result = CliRunner().invoke(cli, ["init", "--path", str(tmp_path)])

        assert result.exit_code == 0
        assert "✓ Created" in result.output
        assert "[generation]" in (tmp_path / CONFIG_FILE_NAME).read_text()

    def test_refuses_to_overwrite(self, tmp_path) -> None:
        """Test init keeps an existing file unless forced."""
        (tmp_path / CONFIG_FILE_NAME).write_text("# mine\n")
        runner = CliRunner()

        refused = runner.invoke(cli, ["init", "--path", str(tmp_path)])
        forced = runner.invoke(cli, ["init", "--path", str(tmp_path), "--force"])

        assert refused.exit_code == 1
        assert "already exists" in refused.output
        assert forced.exit_code == 0
        assert "[output]" in (tmp_path / CONFIG_FILE_NAME).read_text()
