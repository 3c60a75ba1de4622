"""Tests for config loading, validation and paths."""

import pytest
import yaml

from livedash.config import (
    DEFAULT_RESERVED_ROWS,
    DEFAULT_TITLE,
    DashboardConfig,
    get_channel_dir,
    get_config_path,
    load_config,
    save_config,
)
from livedash.errors import ConfigError


class TestLoadConfig:
    """Tests for load_config() and save_config()."""

    def test_missing_file_gives_defaults(self, temp_dir):
        """A missing config file is not an error."""
        config = load_config(temp_dir / "nope.yaml")
        assert config.title == DEFAULT_TITLE
        assert config.reserved_rows == DEFAULT_RESERVED_ROWS
        assert config.refresh_interval == 0.1
        assert config.log_buffer_size == 1000

    def test_partial_file_merges_over_defaults(self, temp_dir):
        """Only the keys present in the file change."""
        path = temp_dir / "cfg.yaml"
        path.write_text(
            "title: Release\n"
            "reserved_rows: 6\n"
            "widget_defaults:\n"
            "  progress_width: 20\n"
            "theme:\n"
            "  success: lime\n"
        )
        config = load_config(path)
        assert config.title == "Release"
        assert config.reserved_rows == 6
        assert config.widget_default("progress_width") == 20
        assert config.widget_default("dialog_width") == 50
        assert config.theme_color("success") == "lime"
        assert config.theme_color("error") == "red"

    def test_unknown_keys_ignored(self, temp_dir):
        path = temp_dir / "cfg.yaml"
        path.write_text("something_else: 1\n")
        assert load_config(path) == DashboardConfig()

    def test_invalid_yaml_raises(self, temp_dir):
        path = temp_dir / "cfg.yaml"
        path.write_text("title: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping_raises(self, temp_dir):
        path = temp_dir / "cfg.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_bad_type_raises(self, temp_dir):
        path = temp_dir / "cfg.yaml"
        path.write_text("reserved_rows: lots\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_save_then_load(self, temp_dir):
        """save_config writes YAML that load_config reads back."""
        path = temp_dir / "sub" / "cfg.yaml"
        config = DashboardConfig(title="Nightly", refresh_interval=0.5, reserved_rows=8)

        written = save_config(config, path)

        assert written == path
        data = yaml.safe_load(path.read_text())
        assert data["title"] == "Nightly"
        assert load_config(path) == config

    def test_default_path_from_env(self, config_path):
        assert get_config_path() == config_path
        save_config(DashboardConfig(title="From env"))
        assert load_config().title == "From env"


class TestValidate:
    """Tests for DashboardConfig.validate()."""

    @pytest.mark.parametrize("field,value", [
        ("refresh_interval", 0),
        ("refresh_interval", -1.5),
        ("reserved_rows", 2),
        ("log_buffer_size", 0),
    ])
    def test_out_of_range(self, field, value):
        config = DashboardConfig()
        setattr(config, field, value)
        with pytest.raises(ConfigError, match=field):
            config.validate()

    def test_defaults_are_valid(self):
        DashboardConfig().validate()


class TestChannelDir:
    """Tests for get_channel_dir()."""

    def test_env_override(self, channel_dir):
        assert get_channel_dir() == channel_dir

    def test_default_is_stable(self, monkeypatch):
        """Separate calls (and processes) resolve the same directory."""
        monkeypatch.delenv("LIVEDASH_CHANNEL_DIR", raising=False)
        assert get_channel_dir() == get_channel_dir()
        assert get_channel_dir().name == "livedash"
