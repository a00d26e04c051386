from __future__ import annotations

from pathlib import Path
from typing import Any, List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_origins(raw: Any) -> List[str]:
    """
    Normalize CORS allow origins from env.

    Supports:
      - list[str] (already parsed)
      - "*"
      - comma-separated string: "https://a.com, https://b.com"
    """
    if raw is None:
        return ["*"]

    if isinstance(raw, list):
        items = [str(x).strip() for x in raw]
        items = [x for x in items if x]
        return items or ["*"]

    s = str(raw).strip()
    if not s or s == "*":
        return ["*"]

    parts = [p.strip() for p in s.split(",")]
    parts = [p for p in parts if p]
    return parts or ["*"]


class Settings(BaseSettings):
    """
    Central backend settings.

    - Env var names match the legacy deployment (.env with ADMIN_USER / ADMIN_PASS / JWT_SECRET / BASE_URL)
    - STORAGE_BACKEND selects where documents live ("file" or "table")
    - One resolved DB URL source of truth for the table backend
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # App identity
    env: str = Field(default="local", alias="APP_ENV")
    app_name: str = Field(default="ticket-panel", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server runtime (uvicorn)
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    max_body_bytes: int = Field(default=2_000_000, alias="MAX_BODY_BYTES")

    # CORS (panel UI only; bots call server-to-server)
    # Union so a plain "https://a.com, https://b.com" env value skips JSON decoding
    cors_allow_origins: Union[list[str], str] = Field(default_factory=lambda: ["*"], alias="BASE_URL")

    # Document storage
    storage_backend: str = Field(default="file", alias="STORAGE_BACKEND")
    data_dir: str = Field(default="./data", alias="DATA_DIR")
    database_url: str = Field(default="", alias="DATABASE_URL")
    db_path: str = Field(default="./data/documents.sqlite", alias="DB_PATH")

    # Bootstrap admin identity
    admin_user: str = Field(default="admin", alias="ADMIN_USER")
    admin_pass: str = Field(default="admin123", alias="ADMIN_PASS")

    # Sessions / hashing
    jwt_secret: str = Field(default="secret", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_ttl_days: int = Field(default=7, alias="SESSION_TTL_DAYS")
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _norm_cors_allow_origins(cls, v: Any) -> list[str]:
        return _split_origins(v)

    @field_validator("host", mode="before")
    @classmethod
    def _norm_host(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "127.0.0.1"

    @field_validator("api_prefix", mode="before")
    @classmethod
    def _norm_api_prefix(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().rstrip("/")
        if s and not s.startswith("/"):
            s = "/" + s
        return s

    @field_validator("storage_backend", mode="before")
    @classmethod
    def _norm_storage_backend(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().lower()
        if s in ("", "file", "json", "fs"):
            return "file"
        if s in ("table", "sql", "db", "kv"):
            return "table"
        raise ValueError("STORAGE_BACKEND must be 'file' or 'table'")

    @field_validator("data_dir", mode="before")
    @classmethod
    def _norm_data_dir(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "./data"

    @field_validator("database_url", mode="before")
    @classmethod
    def _norm_database_url(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("db_path", mode="before")
    @classmethod
    def _norm_db_path(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "./data/documents.sqlite"

    @field_validator("bcrypt_rounds")
    @classmethod
    def _check_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt accepts cost factors 4..31
        return min(max(int(v), 4), 31)

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def resolved_database_url(self) -> str:
        """
        Priority:
        1) DATABASE_URL if provided
        2) Build sqlite:/// URL from DB_PATH (file path or full sqlite URL)
        """
        if self.database_url:
            return self.database_url

        path = self.db_path
        if path.startswith("sqlite:"):
            return path

        p = Path(path)
        if not p.is_absolute():
            if str(p).startswith("./"):
                return f"sqlite:///{p.as_posix()}"
            return f"sqlite:///./{p.as_posix()}"

        # Absolute path needs 4 slashes after scheme (sqlite:////abs/path)
        return f"sqlite:////{p.as_posix().lstrip('/')}"


settings = Settings()
