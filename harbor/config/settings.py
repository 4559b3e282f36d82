"""Root settings model and layered TOML loading for Harbor."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

from harbor.config.models.cache import CacheConfig
from harbor.config.models.fetch import FetchConfig
from harbor.config.models.messaging import MessagingConfig
from harbor.config.models.notifications import NotificationsConfig
from harbor.config.models.observability import ObservabilityConfig
from harbor.config.models.storage import StorageConfig
from harbor.config.models.sync import SyncConfig

DEFAULT_LAYER = "default.toml"


def find_config_dir(start: Path | None = None) -> Path:
    """Locate the directory holding default.toml.

    HARBOR_CONFIG_DIR wins when set. Otherwise the nearest ``config/``
    containing a default layer is used, searching upward from start.
    """
    configured = os.environ.get("HARBOR_CONFIG_DIR")
    if configured:
        path = Path(configured)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {configured}")
        return path

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / "config"
        if (candidate / DEFAULT_LAYER).is_file():
            return candidate
    raise FileNotFoundError(
        f"No config/{DEFAULT_LAYER} found above {origin}; set HARBOR_CONFIG_DIR."
    )


def current_environment() -> str:
    return os.environ.get("HARBOR_ENV", "development")


def overlay(base: Mapping[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively lay top over base; tables merge, anything else replaces."""
    merged = dict(base)
    for key, value in top.items():
        below = merged.get(key)
        if isinstance(below, Mapping) and isinstance(value, Mapping):
            merged[key] = overlay(below, value)
        else:
            merged[key] = value
    return merged


def read_layers(config_dir: Path, environment: str) -> dict[str, Any]:
    """Read the default layer and the optional environment layer over it.

    Raises:
        FileNotFoundError: If the default layer is missing
        tomllib.TOMLDecodeError: If a layer is not valid TOML
    """
    default_path = config_dir / DEFAULT_LAYER
    if not default_path.is_file():
        raise FileNotFoundError(f"Default configuration file not found: {default_path}")

    values = tomllib.loads(default_path.read_text(encoding="utf-8"))
    env_path = config_dir / f"{environment}.toml"
    if env_path.is_file():
        values = overlay(values, tomllib.loads(env_path.read_text(encoding="utf-8")))
    return values


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    ``Settings()`` reads model defaults and HARBOR_* environment variables.
    ``Settings.load()`` additionally reads the TOML layers, giving the order:

    1. Pydantic model defaults (in code)
    2. config/default.toml
    3. config/{HARBOR_ENV}.toml
    4. HARBOR_* environment variables (nested with "__")
    """

    model_config = SettingsConfigDict(
        env_prefix="HARBOR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    cache: CacheConfig = Field(
        default_factory=CacheConfig,
        description="Cache namespace and bounds configuration",
    )
    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Request classification and fetch strategy configuration",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Deferred synchronization configuration",
    )
    notifications: NotificationsConfig = Field(
        default_factory=NotificationsConfig,
        description="Notification defaults",
    )
    messaging: MessagingConfig = Field(
        default_factory=MessagingConfig,
        description="Client messaging configuration",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Storage backend configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def load(
        cls,
        config_dir: Path | None = None,
        environment: str | None = None,
    ) -> "Settings":
        """Build settings from the TOML layers with environment overrides on top."""
        config_dir = config_dir or find_config_dir()
        layers = read_layers(config_dir, environment or current_environment())
        env_values = EnvSettingsSource(cls)()
        return cls(**overlay(layers, env_values))
