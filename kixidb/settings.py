# kixidb/settings.py
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("schema.sql")

MIN_BCRYPT_ROUNDS = 12


class Settings(BaseSettings):
    database_url: str = Field(validation_alias=AliasChoices("database_url", "db_url"))
    db_ssl: bool = True
    app_env: str = Field(
        "production", validation_alias=AliasChoices("app_env", "node_env")
    )
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"
    schema_path: Path = DEFAULT_SCHEMA_PATH
    bcrypt_rounds: int = Field(MIN_BCRYPT_ROUNDS, ge=MIN_BCRYPT_ROUNDS)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def is_development(self) -> bool:
        return self.app_env.strip().lower() == "development"


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """환경변수/.env 에서 설정을 읽는다. env_file 을 주면 해당 파일을 사용."""
    if env_file is not None:
        return Settings(_env_file=env_file, **overrides)
    return Settings(**overrides)
