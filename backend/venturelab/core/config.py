from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModeEnum(str, Enum):
    development = "development"
    production = "production"
    testing = "testing"


class StorageBackend(str, Enum):
    memory = "memory"
    sql = "sql"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── App ───────────────────────────────────────────────────
    MODE: ModeEnum = ModeEnum.development
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "VentureLab"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # Single-user deployments act on behalf of this id unless X-User-Id is sent
    DEFAULT_USER_ID: UUID = UUID("00000000-0000-0000-0000-000000000001")

    # ── Storage ───────────────────────────────────────────────
    STORAGE_BACKEND: StorageBackend = StorageBackend.memory
    AUTO_CREATE_TABLES: bool = False

    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_NAME: str = "venturelab"

    ASYNC_DATABASE_URI: PostgresDsn | str = ""

    @field_validator("ASYNC_DATABASE_URI", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str | None, info) -> Any:
        if isinstance(v, str) and v == "":
            data = info.data
            mode = data.get("MODE", ModeEnum.development)
            query = "ssl=require" if mode == ModeEnum.production else None
            return PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=data.get("DATABASE_USER"),
                password=data.get("DATABASE_PASSWORD"),
                host=data.get("DATABASE_HOST"),
                port=data.get("DATABASE_PORT"),
                path=data.get("DATABASE_NAME"),
                query=query,
            )
        return v

    # ── OpenAI ────────────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    AI_STRUCTURED_MODEL: str = "gpt-4o"
    AI_CHAT_MODEL: str = "gpt-4o"
    AI_TIMEOUT_SECONDS: float = 60.0
    AI_RETRIES: int = 2


settings = Settings()
