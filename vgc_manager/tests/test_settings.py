"""
Tests for Settings / load_settings.
The process environment is cleared per test with monkeypatch; env files
are written to tmp_path.
"""

import pytest

from vgc_manager.config.settings import Settings, load_settings
from vgc_manager.core.exceptions import ConfigurationError

_VARS = (
    "DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME", "DATABASE_URL",
    "VGC_DB_ECHO", "VGC_LOG_LEVEL", "VGC_LENIENT_PARSING", "VGC_CREATE_SCHEMA",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


def _write_env(tmp_path, text):
    path = tmp_path / ".env"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadSettings:

    def test_reads_env_file(self, tmp_path):
        path = _write_env(tmp_path, (
            "DB_USER=collector\n"
            "DB_PASSWORD=p@ss:word\n"
            "DB_HOST=db.local\n"
            "DB_PORT=5433\n"
            "DB_NAME=games\n"
        ))
        settings = load_settings(path)
        url = settings.sqlalchemy_url
        assert url.drivername == "postgresql+psycopg"
        assert url.username == "collector"
        assert url.password == "p@ss:word"
        assert url.host == "db.local"
        assert url.port == 5433
        assert url.database == "games"
        assert "p%40ss%3Aword" in url.render_as_string(hide_password=False)

    def test_defaults(self, tmp_path):
        settings = load_settings(_write_env(tmp_path, "DB_USER=u\nDB_NAME=n\n"))
        assert settings.db_host == "localhost"
        assert settings.db_port == 5432
        assert settings.db_echo is False
        assert settings.lenient_parsing is False
        assert settings.create_schema is True
        assert settings.log_level == "INFO"

    def test_switches(self, tmp_path):
        path = _write_env(tmp_path, (
            "DB_USER=u\nDB_NAME=n\n"
            "VGC_DB_ECHO=true\nVGC_LENIENT_PARSING=1\nVGC_LOG_LEVEL=DEBUG\n"
        ))
        settings = load_settings(path)
        assert settings.db_echo is True
        assert settings.lenient_parsing is True
        assert settings.log_level == "DEBUG"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = _write_env(tmp_path, "DB_USER=u\nDB_NAME=from_file\n")
        monkeypatch.setenv("DB_NAME", "from_env")
        assert load_settings(path).db_name == "from_env"

    def test_database_url_override(self, tmp_path):
        path = _write_env(tmp_path, "DATABASE_URL=sqlite:///collection.db\n")
        assert load_settings(path).sqlalchemy_url == "sqlite:///collection.db"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "missing.env")

    def test_missing_file_ok_with_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        settings = load_settings(tmp_path / "missing.env")
        assert settings.database_url == "sqlite:///:memory:"

    def test_incomplete_connection_raises(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(_write_env(tmp_path, "DB_HOST=db.local\n"))
        assert "DB_USER" in str(exc_info.value)

    def test_bad_port_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(_write_env(tmp_path, "DB_USER=u\nDB_NAME=n\nDB_PORT=abc\n"))


class TestSettingsModel:

    def test_construct_by_field_name(self):
        settings = Settings(database_url="sqlite:///:memory:", _env_file=None)
        assert settings.sqlalchemy_url == "sqlite:///:memory:"

    def test_log_level_normalised(self):
        settings = Settings(database_url="sqlite://", log_level="debug", _env_file=None)
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(_write_env(tmp_path, "DATABASE_URL=sqlite://\nVGC_LOG_LEVEL=LOUD\n"))
