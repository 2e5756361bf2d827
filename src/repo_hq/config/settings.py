"""Application settings using Pydantic Settings."""

import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from repo_hq.core.exceptions import ConfigurationError

CONFIG_PATH_ENV_VAR = "REPO_HQ_CONFIG"


def get_config_path() -> Path:
    """Path of the TOML config file (~/.config/repo-hq/config.toml by default)."""
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "repo-hq" / "config.toml"


class Settings(BaseSettings):
    """Settings loaded from the config file and REPO_HQ_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REPO_HQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Base directory for query resolution (<root>/<host>/<path>)
    root: str | None = None

    # Default scan roots for `import`
    includes: list[str] = []

    # Glob patterns of paths to keep out of the catalog
    excludes: list[str] = []

    cache_path: str = "~/.cache/repo-hq/cache.json"
    log_level: str = "WARNING"

    @field_validator("root", "cache_path")
    @classmethod
    def _expand_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return str(Path(value).expanduser())

    @field_validator("includes")
    @classmethod
    def _expand_includes(cls, value: list[str]) -> list[str]:
        return [str(Path(v).expanduser()) for v in value]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init kwargs, environment, .env, TOML config file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=get_config_path()),
        )

    @property
    def root_dir(self) -> Path | None:
        return Path(self.root) if self.root else None

    @property
    def include_dirs(self) -> list[Path]:
        return [Path(p) for p in self.includes]


def load_settings(**overrides) -> Settings:
    """Load settings, converting validation failures into ConfigurationError."""
    try:
        return Settings(**overrides)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {get_config_path()}: {e}",
            details={"path": str(get_config_path())},
        ) from e
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigurationError(
            f"Invalid configuration for '{field}': {first_error['msg']}",
            details={"field": field},
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
