"""Application settings and configuration."""

from enum import Enum
from functools import lru_cache
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ZeroDistancePolicy(str, Enum):
    """How the ranker treats a promoter located at the requested point."""

    CLAMP = "clamp"
    EXCLUDE = "exclude"


class DuplicatePolicy(str, Enum):
    """What happens when an unforced relationship already exists."""

    REJECT = "reject"
    MERGE = "merge"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Graphgate API", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=8000, description="Port to bind to")
    log_level: str = Field(default="INFO", description="Root logging level")

    # CORS
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )

    # PostgreSQL / Apache AGE
    postgres_user: str = Field(default="admin", description="PostgreSQL user")
    postgres_password: str = Field(
        default="supersecretpassword", description="PostgreSQL password"
    )
    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    postgres_db: str = Field(default="graphgate", description="PostgreSQL database")
    age_graph_name: str = Field(default="graphgate", description="AGE graph name")
    pool_min_size: int = Field(default=5, description="Minimum pool connections")
    pool_max_size: int = Field(default=20, description="Maximum pool connections")

    # Dispatcher behaviour
    default_page_size: int = Field(
        default=10, ge=1, description="Page size used when a request omits limit"
    )
    max_page_size: int = Field(
        default=100, ge=1, description="Largest page size a request may ask for"
    )
    zero_distance_policy: ZeroDistancePolicy = Field(
        default=ZeroDistancePolicy.CLAMP,
        description="Ranking policy for promoters at distance zero",
    )
    min_distance: float = Field(
        default=1e-6, gt=0, description="Distance floor used by the clamp policy"
    )
    duplicate_relationship_policy: DuplicatePolicy = Field(
        default=DuplicatePolicy.REJECT,
        description="Handling of unforced duplicate relationships",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
