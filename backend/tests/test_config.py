from uuid import UUID

from venturelab.core.config import ModeEnum, Settings, StorageBackend


def test_defaults(monkeypatch):
    for name in ("MODE", "STORAGE_BACKEND", "ASYNC_DATABASE_URI", "API_PREFIX"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.MODE == ModeEnum.development
    assert config.STORAGE_BACKEND == StorageBackend.memory
    assert config.API_PREFIX == "/api"
    assert config.DEFAULT_USER_ID == UUID("00000000-0000-0000-0000-000000000001")


def test_database_uri_is_assembled_from_parts(monkeypatch):
    monkeypatch.delenv("ASYNC_DATABASE_URI", raising=False)
    monkeypatch.setenv("DATABASE_HOST", "db.internal")
    monkeypatch.setenv("DATABASE_NAME", "ventures")

    uri = str(Settings(_env_file=None).ASYNC_DATABASE_URI)

    assert uri.startswith("postgresql+asyncpg://")
    assert "db.internal:5432/ventures" in uri
    assert "ssl=require" not in uri


def test_production_requires_ssl(monkeypatch):
    monkeypatch.delenv("ASYNC_DATABASE_URI", raising=False)
    monkeypatch.setenv("MODE", "production")

    assert "ssl=require" in str(Settings(_env_file=None).ASYNC_DATABASE_URI)


def test_explicit_uri_wins(monkeypatch):
    monkeypatch.setenv("ASYNC_DATABASE_URI", "sqlite+aiosqlite:///./venturelab.db")
    monkeypatch.setenv("STORAGE_BACKEND", "sql")

    config = Settings(_env_file=None)

    assert config.ASYNC_DATABASE_URI == "sqlite+aiosqlite:///./venturelab.db"
    assert config.STORAGE_BACKEND == StorageBackend.sql
