"""
Tests for settings parsing.
"""

from legisync.config import AppConfig, DatabaseConfig, SourcesConfig


def test_database_url_switches_to_asyncpg() -> None:
    config = DatabaseConfig(database_url="postgresql://u:p@localhost/legisync")
    assert config.connection_string == "postgresql+asyncpg://u:p@localhost/legisync"
    assert not config.is_sqlite


def test_sqlite_connection_string() -> None:
    config = DatabaseConfig(driver="sqlite+aiosqlite", database=":memory:", database_url=None)
    assert config.connection_string == "sqlite+aiosqlite:///:memory:"
    assert config.is_sqlite


def test_connection_string_from_parts() -> None:
    config = DatabaseConfig(
        database_url=None,
        host="db",
        port=5433,
        database="bills",
        username="sync",
        password="secret",
    )
    assert config.connection_string == "postgresql+asyncpg://sync:secret@db:5433/bills"


def test_list_settings_accept_comma_separated() -> None:
    app = AppConfig(api_keys="key-one, key-two", cors_origins='["https://legisync.app"]')
    sources = SourcesConfig(openstates_jurisdictions="CA,NY")

    assert app.api_keys == ["key-one", "key-two"]
    assert app.cors_origins == ["https://legisync.app"]
    assert sources.openstates_jurisdictions == ["ca", "ny"]


def test_source_keys_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CONGRESS_GOV_API_KEY", "from-env")
    monkeypatch.setenv("OPENSTATES_API_KEY", "os-env")

    sources = SourcesConfig()

    assert sources.congress_api_key == "from-env"
    assert sources.openstates_api_key == "os-env"
