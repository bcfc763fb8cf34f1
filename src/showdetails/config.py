"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (SHOWDETAILS__CACHE__BACKEND=sqlite)
  2. showdetails.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ValidationInfo, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("showdetails")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")


def _find_config_file() -> str | None:
    """Return the path of the first showdetails.yaml found, or None."""
    candidates = [
        Path("showdetails.yaml"),
        Path(platformdirs.user_config_dir("showdetails")) / "showdetails.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class FetcherSettings(BaseModel):
    timeout_seconds: float = 30.0
    max_connections: int = 10


class CacheSettings(BaseModel):
    backend: Literal["memory", "sqlite"] = "memory"
    db_path: str = _DEFAULT_DB_PATH
    found_ttl_hours: int = 24
    not_found_ttl_hours: int = 1
    cleanup_interval_hours: int = 1


class BlogSettings(BaseModel):
    base_url: str = "https://blogs.msdn.microsoft.com/webdev/"
    tag: str = "communitystandup"
    post_slug: str = "notes-from-the-asp-net-community-standup"
    # The upstream blog only serves full HTML to browser-like agents
    user_agent: str = "System.Net.Http.HttpClient like Mozilla/5.0 Edge"
    # Recap posts are accepted when published in [min, max) days after the show
    min_days_after_show: int = 0
    max_days_after_show: int = 2
    # None restores the unbounded archive traversal
    max_pages: int | None = 50
    heading_mode: Literal["legacy", "decrement"] = "legacy"

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"

    @model_validator(mode="after")
    def check_window(self) -> BlogSettings:
        if self.max_days_after_show <= self.min_days_after_show:
            raise ValueError("max_days_after_show must be greater than min_days_after_show")
        return self


class GitHubSettings(BaseModel):
    api_url: str = "https://api.github.com"
    owner: str = "aspnet"
    repository: str = "live.asp.net.contents"
    branch: str = "master"
    folder: str = "ShowDetails"
    user_agent: str = "live.asp.net"

    @field_validator("owner", "repository", "branch", "folder", mode="before")
    @classmethod
    def blank_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SHOWDETAILS__GITHUB__BRANCH=main
        env_prefix="SHOWDETAILS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    source: Literal["blog", "github"] = "github"
    server: ServerSettings = ServerSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
    blog: BlogSettings = BlogSettings()
    github: GitHubSettings = GitHubSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
