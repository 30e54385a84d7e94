"""
Unit tests for ConfigLoader and .env parsing.
"""

import json

import pytest

from keepfoss.utils.config_loader import ConfigLoader, load_env_file


@pytest.fixture
def config_paths(tmp_path):
    return tmp_path / "config" / "app_config.json", tmp_path / ".env"


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_missing_file_writes_defaults(self, config_paths):
        config_path, env_path = config_paths
        config = ConfigLoader(config_path, env_path)

        assert config_path.exists()
        assert config.get("app.name") == "KeepFOSS"
        assert config.get("backup.filename_prefix") == "keepfoss_backup"
        assert config.get("backup.indent") == 2
        assert config.get("database.user_name") == "default_user"
        assert config.get("database.data_dir") is None

    def test_get_missing_key_returns_default(self, config_paths):
        config = ConfigLoader(*config_paths)
        assert config.get("nope.nothing", "fallback") == "fallback"
        assert config.get("app.name.deeper") is None

    def test_set_persists(self, config_paths):
        config_path, env_path = config_paths
        config = ConfigLoader(config_path, env_path)
        config.set("backup.filename_prefix", "mine")

        reloaded = ConfigLoader(config_path, env_path)
        assert reloaded.get("backup.filename_prefix") == "mine"

    def test_set_creates_sections(self, config_paths):
        config = ConfigLoader(*config_paths)
        config.set("ui.grid.columns", 3, save=False)
        assert config.get("ui.grid.columns") == 3

    def test_existing_file_is_loaded(self, config_paths):
        config_path, env_path = config_paths
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"logging": {"level": "DEBUG"}}), encoding="utf-8")

        config = ConfigLoader(config_path, env_path)
        assert config.get("logging.level") == "DEBUG"

    def test_malformed_file_falls_back_to_defaults(self, config_paths):
        config_path, env_path = config_paths
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json", encoding="utf-8")

        config = ConfigLoader(config_path, env_path)
        assert config.get("app.name") == "KeepFOSS"

    def test_env_overrides_are_coerced(self, config_paths):
        config_path, env_path = config_paths
        env_path.write_text(
            "# overrides\n"
            "LOG_LEVEL=\"WARNING\"\n"
            "BACKUP_INDENT=4\n"
            "KEEPFOSS_USER='alice'\n"
            "UNRELATED=1\n",
            encoding="utf-8",
        )

        config = ConfigLoader(config_path, env_path)
        assert config.get("logging.level") == "WARNING"
        assert config.get("backup.indent") == 4
        assert config.get("database.user_name") == "alice"
        assert config.get_env("UNRELATED") == "1"

    def test_numeric_looking_text_overrides_stay_strings(self, config_paths):
        config_path, env_path = config_paths
        env_path.write_text(
            "KEEPFOSS_USER=1234\n"
            "KEEPFOSS_DATA_DIR=2024\n"
            "BACKUP_PREFIX=42\n"
            "LOG_LEVEL=10\n"
            "DB_RETRIES=5\n",
            encoding="utf-8",
        )

        config = ConfigLoader(config_path, env_path)
        assert config.get("database.user_name") == "1234"
        assert config.get("database.data_dir") == "2024"
        assert config.get("backup.filename_prefix") == "42"
        assert config.get("logging.level") == "10"
        assert config.get("database.connect_retries") == 5

    def test_env_overrides_are_not_persisted(self, config_paths):
        config_path, env_path = config_paths
        env_path.write_text("BACKUP_PREFIX=override\n", encoding="utf-8")
        ConfigLoader(config_path, env_path)

        stored = json.loads(config_path.read_text(encoding="utf-8"))
        assert stored["backup"]["filename_prefix"] == "keepfoss_backup"


def test_load_env_file_missing(tmp_path):
    assert load_env_file(tmp_path / "absent.env") == {}


def test_load_env_file_splits_on_first_equals(tmp_path):
    env = tmp_path / ".env"
    env.write_text("KEY=a=b\n\n#comment=1\n", encoding="utf-8")
    assert load_env_file(env) == {"KEY": "a=b"}
