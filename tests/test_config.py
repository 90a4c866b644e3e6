"""Tests for relseed.toml configuration."""

import pytest
from pydantic import ValidationError

from relseed.config import CONFIG_FILE_NAME, Config, GenerationSettings, OutputSettings


class TestConfigDefaults:
    """Tests for default settings."""

    def test_defaults(self) -> None:
        """Test default generation and output settings."""
        config = Config()

        assert config.generation.random_seed is None
        assert config.generation.null_probability == 0.1
        assert config.generation.locale == "en_US"
        assert config.output.include_comments is True
        assert config.output.insert_directly_into_on_model_creating is True
        assert config.output.generated_class_name == "DbSeedData"
        assert config.output.model_builder_name == "modelBuilder"

    def test_indent_unit(self) -> None:
        """Test indentation follows use_tabs and indent_size."""
        assert OutputSettings(indent_size=2).indent_unit == "  "
        assert OutputSettings(use_tabs=True).indent_unit == "\t"

    def test_null_probability_validated(self) -> None:
        """Test probabilities outside [0, 1] are rejected."""
        with pytest.raises(ValidationError):
            GenerationSettings(null_probability=1.5)

    def test_env_override(self, monkeypatch) -> None:
        """Test settings can be overridden with environment variables."""
        monkeypatch.setenv("RELSEED_GENERATION_RANDOM_SEED", "7")
        monkeypatch.setenv("RELSEED_OUTPUT_USE_TABS", "true")

        config = Config()

        assert config.generation.random_seed == 7
        assert config.output.use_tabs is True


class TestConfigToml:
    """Tests for reading and writing relseed.toml."""

    def test_from_toml(self, tmp_path) -> None:
        """Test loading settings from a TOML file."""
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(
            "[generation]\n"
            "random_seed = 42\n"
            "null_probability = 0.25\n"
            "\n"
            "[output]\n"
            'namespace = "Library.Data"\n'
            "generate_separate_methods_per_entity = true\n"
        )

        config = Config.from_toml(path)

        assert config.generation.random_seed == 42
        assert config.generation.null_probability == 0.25
        assert config.output.namespace == "Library.Data"
        assert config.output.generate_separate_methods_per_entity is True
        assert config.output.include_comments is True

    def test_from_toml_missing(self, tmp_path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Config.from_toml(tmp_path / "missing.toml")

    def test_to_toml_round_trip(self, tmp_path) -> None:
        """Test written settings load back unchanged."""
        config = Config(
            generation=GenerationSettings(random_seed=5, guid_salt="tenant"),
            output=OutputSettings(namespace="App.Data", use_tabs=True),
        )
        path = tmp_path / CONFIG_FILE_NAME

        config.to_toml(path)
        loaded = Config.from_toml(path)

        assert loaded.generation.random_seed == 5
        assert loaded.generation.guid_salt == "tenant"
        assert loaded.output.namespace == "App.Data"
        assert loaded.output.use_tabs is True

    def test_to_toml_escapes_strings(self, tmp_path) -> None:
        """Test quotes, backslashes and newlines survive a round trip."""
        config = Config(
            generation=GenerationSettings(guid_salt='say "hi"\\there\n'),
            output=OutputSettings(namespace='App\\"Data"'),
        )
        path = tmp_path / CONFIG_FILE_NAME

        config.to_toml(path)
        loaded = Config.from_toml(path)

        assert loaded.generation.guid_salt == 'say "hi"\\there\n'
        assert loaded.output.namespace == 'App\\"Data"'

    def test_to_toml_comments_out_unset_values(self, tmp_path) -> None:
        """Test unset optional values are written commented out."""
        path = tmp_path / CONFIG_FILE_NAME

        Config().to_toml(path)
        text = path.read_text()
        loaded = Config.from_toml(path)

        assert "# random_seed = 42" in text
        assert loaded.generation.random_seed is None
        assert loaded.output.namespace is None

    def test_find_and_load_walks_up(self, tmp_path) -> None:
        """Test the nearest relseed.toml in a parent directory is found."""
        (tmp_path / CONFIG_FILE_NAME).write_text("[generation]\nrandom_seed = 9\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        config = Config.find_and_load(nested)

        assert config.generation.random_seed == 9
