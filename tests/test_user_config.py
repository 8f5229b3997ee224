"""
Unit tests for configuration loading and normalization.
"""

import os

import pytest

from fileinventory.config import DEFAULT_WORKERS, INVENTORY_FILE
from fileinventory.errors import ConfigError
from fileinventory.user_config import UserConfig, normalize_directory


class TestNormalizeDirectory:
    """Test normalize_directory()."""

    def test_expands_home(self, monkeypatch, temp_dir):
        monkeypatch.setenv("HOME", str(temp_dir))
        assert normalize_directory("~/Music") == os.path.join(str(temp_dir), "Music")

    def test_strips_trailing_separator(self, temp_dir):
        assert normalize_directory(str(temp_dir) + os.sep) == str(temp_dir)

    def test_collapses_redundant_parts(self, temp_dir):
        messy = str(temp_dir) + os.sep + "a" + os.sep + "." + os.sep + "b" + os.sep + ".."
        assert normalize_directory(messy) == os.path.join(str(temp_dir), "a")

    def test_relative_becomes_absolute(self):
        assert os.path.isabs(normalize_directory("some/dir"))


class TestUserConfig:
    """Test UserConfig."""

    def test_roots_merge_global_patterns(self, write_config, temp_dir, clean_env):
        path = write_config({
            'exclude': [r"\.DS_Store$"],
            'roots': [
                {'directory': str(temp_dir / "music"), 'exclude': [r"\.tmp$"]},
                {'directory': str(temp_dir / "photos") + os.sep, 'enabled': False},
            ],
        })
        roots = UserConfig(path).roots
        assert [r.directory for r in roots] == [
            str(temp_dir / "music"),
            str(temp_dir / "photos"),
        ]
        assert roots[0].exclude == [r"\.tmp$", r"\.DS_Store$"]
        assert roots[0].enabled is True
        assert roots[1].exclude == [r"\.DS_Store$"]
        assert roots[1].enabled is False

    def test_duplicate_roots_rejected(self, write_config, temp_dir, clean_env):
        path = write_config({'roots': [
            {'directory': str(temp_dir / "music")},
            {'directory': str(temp_dir / "x" / ".." / "music") + os.sep},
        ]})
        with pytest.raises(ConfigError) as excinfo:
            UserConfig(path).roots
        assert "same directory" in str(excinfo.value)

    def test_missing_roots(self, write_config, clean_env):
        with pytest.raises(ConfigError):
            UserConfig(write_config({})).roots

    def test_root_without_directory(self, write_config, clean_env):
        with pytest.raises(ConfigError):
            UserConfig(write_config({'roots': [{'enabled': True}]})).roots

    def test_invalid_pattern(self, write_config, temp_dir, clean_env):
        path = write_config({'roots': [{'directory': str(temp_dir), 'exclude': ["[bad"]}]})
        with pytest.raises(ConfigError):
            UserConfig(path).roots

    def test_malformed_file(self, temp_dir, clean_env):
        path = temp_dir / "config.json"
        path.write_text("{oops")
        with pytest.raises(ConfigError) as excinfo:
            UserConfig(path).roots
        assert str(path) in str(excinfo.value)

    def test_defaults(self, write_config, clean_env):
        config = UserConfig(write_config({}))
        assert config.workers == DEFAULT_WORKERS
        assert config.inventory_file == INVENTORY_FILE
        assert config.force == {'hash': False, 'audio_tags': False, 'image_metadata': False}

    def test_environment_overrides_file(self, write_config, clean_env):
        path = write_config({'workers': 2})
        clean_env.setenv("FILEINVENTORY_WORKERS", "8")
        assert UserConfig(path).workers == 8

    def test_invalid_workers(self, write_config, clean_env):
        with pytest.raises(ConfigError):
            UserConfig(write_config({'workers': 0})).workers

    def test_force_flags(self, write_config, clean_env):
        config = UserConfig(write_config({'force': {'audio_tags': True}}))
        assert config.force == {'hash': False, 'audio_tags': True, 'image_metadata': False}

    def test_unknown_force_key(self, write_config, clean_env):
        with pytest.raises(ConfigError):
            UserConfig(write_config({'force': {'thumbnails': True}})).force

    def test_config_path_from_environment(self, write_config, clean_env):
        path = write_config({'workers': 3})
        clean_env.setenv("FILEINVENTORY_CONFIG", str(path))
        config = UserConfig()
        assert config.config_file_path == path
        assert config.workers == 3

    def test_create_example_config(self, temp_dir, clean_env):
        config = UserConfig(temp_dir / "new" / "config.json")
        assert config.create_example_config() is True
        assert config.config_file_path.exists()
        assert len(config.roots) == 2
