"""
Unit tests for configuration loading and validation.
"""
import pytest
from pydantic import ValidationError

from propdoc.config import PropDocConfig, ResolutionConfig, load_config
from propdoc.resolution.symbol_table import MergePolicy


class TestResolutionConfig:
    """Test resolution settings."""

    def test_defaults(self):
        """Test default values."""
        config = ResolutionConfig()

        assert config.extensions == [".js", ".jsx"]
        assert config.max_depth == 32
        assert config.strict_parse is False
        assert config.conservative_exports is False
        assert config.merge_policy == MergePolicy.IMPORTED

    def test_extensions_are_normalized(self):
        """Test that a missing leading dot is added."""
        assert ResolutionConfig(extensions=["js", ".mjs"]).extensions == [".js", ".mjs"]

    def test_rejects_empty_extensions(self):
        """Test that at least one extension is required."""
        with pytest.raises(ValidationError):
            ResolutionConfig(extensions=[])

    def test_rejects_negative_depth(self):
        """Test that a negative depth limit is rejected."""
        with pytest.raises(ValidationError):
            ResolutionConfig(max_depth=-1)

    def test_merge_policy_from_string(self):
        """Test that the merge policy is read from its string value."""
        assert ResolutionConfig(merge_policy="local").merge_policy == MergePolicy.LOCAL


class TestConfigFiles:
    """Test YAML configuration files."""

    def test_load_from_file(self, tmp_path):
        """Test that values from YAML override the defaults."""
        config_file = tmp_path / "propdoc.yaml"
        config_file.write_text(
            "resolution:\n"
            "  max_depth: 5\n"
            "  merge_policy: local\n"
            "handlers:\n"
            "  component_bases: [Base]\n"
            "export:\n"
            "  pretty: true\n"
        )

        config = PropDocConfig.load_from_file(config_file)

        assert config.resolution.max_depth == 5
        assert config.resolution.merge_policy == MergePolicy.LOCAL
        assert config.handlers.component_bases == ["Base"]
        assert config.export.pretty is True
        assert config.crawl.max_file_size_mb == 5

    def test_empty_file_gives_defaults(self, tmp_path):
        """Test that an empty YAML file is accepted."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert PropDocConfig.load_from_file(config_file) == PropDocConfig()

    def test_save_and_load(self, tmp_path):
        """Test saving a configuration and reading it back."""
        config = PropDocConfig(resolution=ResolutionConfig(max_depth=3, strict_parse=True))
        config_file = tmp_path / "saved.yaml"

        config.save_to_file(config_file)

        assert PropDocConfig.load_from_file(config_file) == config

    def test_load_config_explicit_path(self, tmp_path):
        """Test load_config with a path."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("crawl:\n  max_file_size_mb: 1\n")

        assert load_config(str(config_file)).crawl.max_file_size_mb == 1

    def test_load_config_from_working_directory(self, tmp_path, monkeypatch):
        """Test that propdoc.yaml in the working directory is picked up."""
        (tmp_path / "propdoc.yaml").write_text("resolution:\n  max_depth: 7\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().resolution.max_depth == 7
