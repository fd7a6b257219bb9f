# src/upload_api/settings.py
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

# Fixed per deployment; not read from the environment.
BUCKET_NAME = "uploads-s3-bucket"

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
VALID_DATABASE_BACKENDS = ["sqlite", "postgres"]
MOTO_SERVER_URL = "http://localhost:5000"


class DatabaseSettings(BaseSettings):
    """
    PostgreSQL connection details.

    Read from the libpq-style variables ``PGHOST``, ``PGUSER``, ``PGPASSWORD``,
    ``PGDATABASE`` and ``PGPORT``. The ``PG`` prefix keeps ``USER`` (always set
    by the login shell) from leaking into the database user.
    """

    host: str = Field(default="localhost", description="Database host")
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="password", description="Database password")
    database: str = Field(default="mydb", description="Database name")
    port: int = Field(default=5432, description="Database port")

    model_config = SettingsConfigDict(
        env_prefix="PG",
        case_sensitive=False,
        extra="ignore",
    )

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``psycopg2.connect``."""
        return {
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "dbname": self.database,
            "port": self.port,
        }


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from upload_api.settings import get_settings
        settings = get_settings()
        backend = settings.database_backend
    """

    # Application Settings
    app_name: str = Field(
        default="upload-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        validation_alias=AliasChoices("deployment_mode", "DEPLOYMENT_MODE", "EXEC_MODE"),
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("aws_region", "AWS_DEFAULT_REGION"),
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_access_key_id", "AWS_ACCESS_KEY_ID"),
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_secret_access_key", "AWS_SECRET_ACCESS_KEY"),
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("aws_endpoint_url", "AWS_ENDPOINT_URL"),
        description="Custom S3 endpoint, e.g. a moto server"
    )

    # Database Configuration
    database_backend: Optional[str] = Field(
        default=None,
        description="sqlite or postgres; derived from deployment_mode when unset"
    )

    sqlite_path: str = Field(
        default="uploads.db",
        description="SQLite database file used by the sqlite backend"
    )

    postgres: DatabaseSettings = Field(default_factory=DatabaseSettings)

    # Multipart Configuration
    upload_dir: Optional[str] = Field(
        default=None,
        description="Directory for spooled upload parts (system temp dir when unset)"
    )

    # Local Server
    server_host: str = Field(default="localhost")
    server_port: int = Field(default=3000)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("deployment_mode", mode="before")
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Map legacy deployment mode names onto the current ones."""
        if v:
            mode_mapping = {
                "local": "local-dev",
                "local-mock": "local-dev",
                "mock": "aws-mock",
                "cloud": "aws-prod",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v):
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator("database_backend")
    @classmethod
    def validate_database_backend(cls, v):
        if v is not None and v not in VALID_DATABASE_BACKENDS:
            raise ValueError(f"Invalid database_backend: {v}. Must be one of {VALID_DATABASE_BACKENDS}")
        return v

    @model_validator(mode="after")
    def apply_mode_defaults(self) -> Self:
        """Fill in the values that depend on the deployment mode."""
        if self.database_backend is None:
            self.database_backend = "sqlite" if self.deployment_mode == "local-dev" else "postgres"

        if self.deployment_mode == "aws-mock":
            # aws-mock talks to a moto server with throwaway credentials
            self.aws_endpoint_url = self.aws_endpoint_url or MOTO_SERVER_URL
            self.aws_access_key_id = self.aws_access_key_id or "mock"
            self.aws_secret_access_key = self.aws_secret_access_key or "mock"
        return self

    @property
    def bucket_name(self) -> str:
        return BUCKET_NAME

    def describe(self) -> Dict[str, Any]:
        """Settings as a flat dict with secrets masked, for display."""
        return {
            "app_name": self.app_name,
            "deployment_mode": self.deployment_mode,
            "aws_region": self.aws_region,
            "aws_endpoint_url": self.aws_endpoint_url,
            "bucket_name": self.bucket_name,
            "database_backend": self.database_backend,
            "sqlite_path": self.sqlite_path,
            "pg_host": self.postgres.host,
            "pg_user": self.postgres.user,
            "pg_password": "****",
            "pg_database": self.postgres.database,
            "pg_port": self.postgres.port,
            "upload_dir": self.upload_dir,
            "server": f"{self.server_host}:{self.server_port}",
            "log_level": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=(".env", ".env.local-dev", ".env.aws-mock", ".env.aws-prod"),
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
