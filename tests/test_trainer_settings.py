"""
Tests for Settings and load_settings().
"""

import json
import logging

import pytest

from verb_trainer import config as config_module
from verb_trainer.catalog.loader import JsonFileCatalogSource, RestCatalogSource
from verb_trainer.config import Settings, default_data_dir, load_settings
from verb_trainer.ledger.storage import DEFAULT_CAPACITY_BYTES, JsonFileStore
from verb_trainer.sync.remote import RestAttemptStore

REMOTE = "https://db.example/rest/v1"


class TestSettings:
    """Tests for Settings validation and factories."""

    def test_defaults_when_only_data_dir_then_local_only(self, tmp_path):
        settings = Settings(data_dir=tmp_path)

        assert settings.has_remote is False
        assert settings.ledger_capacity_bytes == DEFAULT_CAPACITY_BYTES
        assert settings.remote_timeout == 30.0

    def test_init_when_no_data_dir_then_platform_default(self):
        assert Settings().data_dir == default_data_dir()

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"ledger_capacity_bytes": 0}, "ledger_capacity_bytes"),
            ({"remote_timeout": 0}, "remote_timeout"),
            ({"remote_url": "ftp://db.example"}, "http"),
        ],
    )
    def test_init_when_invalid_then_raises(self, tmp_path, kwargs, match):
        with pytest.raises(ValueError, match=match):
            Settings(data_dir=tmp_path, **kwargs)

    def test_create_store_when_called_then_file_store_in_data_dir(self, tmp_path):
        store = Settings(data_dir=tmp_path, ledger_capacity_bytes=1024).create_store()

        assert isinstance(store, JsonFileStore)
        assert store.directory == tmp_path
        assert store.capacity_bytes == 1024

    def test_create_remote_when_url_then_rest_store(self, tmp_path):
        remote = Settings(data_dir=tmp_path, remote_url=REMOTE, remote_timeout=5).create_remote()

        assert isinstance(remote, RestAttemptStore)
        assert remote.timeout == 5

    def test_create_remote_when_no_url_then_raises(self, tmp_path):
        with pytest.raises(ValueError, match="remote_url"):
            Settings(data_dir=tmp_path).create_remote()

    def test_catalog_sources_when_remote_and_file_then_both(self, tmp_path):
        settings = Settings(
            data_dir=tmp_path, remote_url=REMOTE, fallback_catalog_path=tmp_path / "verbs.json"
        )

        assert isinstance(settings.create_catalog_source(), RestCatalogSource)
        assert isinstance(settings.create_fallback_catalog_source(), JsonFileCatalogSource)

    def test_catalog_sources_when_file_only_then_file_primary(self, tmp_path):
        settings = Settings(data_dir=tmp_path, fallback_catalog_path=str(tmp_path / "verbs.json"))

        assert isinstance(settings.create_catalog_source(), JsonFileCatalogSource)
        assert settings.create_fallback_catalog_source() is None

    def test_catalog_sources_when_none_configured_then_raises(self, tmp_path):
        with pytest.raises(ValueError):
            Settings(data_dir=tmp_path).create_catalog_source()

    def test_to_dict_when_api_key_set_then_omitted(self, tmp_path):
        d = Settings(data_dir=tmp_path, remote_url=REMOTE, remote_api_key="secret").to_dict()

        assert "remote_api_key" not in d
        assert d["data_dir"] == str(tmp_path)
        assert d["remote_url"] == REMOTE


class TestDefaultDataDir:
    """Tests for default_data_dir()."""

    def test_default_data_dir_when_macos_then_application_support(self, monkeypatch):
        monkeypatch.setattr(config_module.platform, "system", lambda: "Darwin")

        assert "Application Support" in str(default_data_dir())

    def test_default_data_dir_when_linux_then_local_share(self, monkeypatch):
        monkeypatch.setattr(config_module.platform, "system", lambda: "Linux")

        assert default_data_dir().parts[-3:] == (".local", "share", "German Verb Trainer")


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_load_when_file_and_env_then_env_wins(self, tmp_path):
        # Arrange
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps({"data_dir": str(tmp_path), "remote_url": REMOTE, "remote_timeout": 10}),
            encoding="utf-8",
        )
        env = {"VERB_TRAINER_REMOTE_TIMEOUT": "5", "VERB_TRAINER_USER_ID": "u1"}

        # Act
        settings = load_settings(path, env=env)

        # Assert
        assert settings.remote_timeout == 5.0
        assert settings.remote_url == REMOTE
        assert settings.user_id == "u1"

    def test_load_when_no_file_then_env_only(self, tmp_path):
        settings = load_settings(env={"VERB_TRAINER_DATA_DIR": str(tmp_path)})

        assert settings.data_dir == tmp_path
        assert settings.has_remote is False

    def test_load_when_empty_env_value_then_ignored(self, tmp_path):
        settings = load_settings(env={"VERB_TRAINER_DATA_DIR": str(tmp_path), "VERB_TRAINER_REMOTE_URL": ""})

        assert settings.remote_url is None

    def test_load_when_unknown_key_then_warned_and_ignored(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"data_dir": str(tmp_path), "colour": "blue"}), encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            load_settings(path, env={})

        assert "colour" in caplog.text

    def test_load_when_env_not_a_number_then_raises(self, tmp_path):
        env = {"VERB_TRAINER_DATA_DIR": str(tmp_path), "VERB_TRAINER_LEDGER_CAPACITY_BYTES": "lots"}

        with pytest.raises(ValueError, match="VERB_TRAINER_LEDGER_CAPACITY_BYTES"):
            load_settings(env=env)

    def test_load_when_file_missing_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.json", env={})

    def test_load_when_file_not_object_then_raises(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ValueError, match="JSON object"):
            load_settings(path, env={})
