from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quickcmd.detector.types import DetectionStrategy


class Settings(BaseSettings):
    """Runtime settings, read from ``QUICKCMD_*`` environment variables.

    A ``.env`` file in the working directory is honoured as well. The
    workspace root is optional: without one, detection reports an unknown
    project and only wildcard categories survive filtering.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUICKCMD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Workspace under inspection
    workspace_root: Optional[Path] = None

    # Detection
    detection_strategy: DetectionStrategy = DetectionStrategy.BALANCED
    min_detection_score: int = Field(default=50, ge=0)
    max_concurrent_probes: int = Field(default=16, ge=1)

    # Explicit user config file; otherwise <workspace>/.quickcmd/config.{json,yaml,yml}
    user_config_path: Optional[Path] = None

    # Command store
    database_url: str = "sqlite:///quickcmd.db"
    seed_default_commands: bool = True

    # Dependency checks (seconds)
    check_dependencies: bool = True
    dependency_cache_ttl: float = Field(default=30.0, gt=0)
    dependency_failure_ttl: float = Field(default=10.0, gt=0)
    dependency_check_timeout: float = Field(default=5.0, gt=0)
    dependency_batch_timeout: float = Field(default=10.0, gt=0)

    # CORS: allowed origins, given as a JSON list in the environment.
    cors_origins: list[str] = ["*"]

    # App
    debug: bool = True

    @field_validator("detection_strategy", mode="before")
    @classmethod
    def normalise_strategy(cls, v):
        return v.lower() if isinstance(v, str) else v


def get_settings() -> Settings:
    return Settings()
