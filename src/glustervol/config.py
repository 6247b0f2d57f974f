"""Plugin configuration using pydantic-settings.

Configuration hierarchy:
- HeketiConfig: Remote manager connection and polling
- VolumeConfig: Defaults applied to VolumeDriver.Create
- GlusterCliConfig: gluster CLI backend settings
- StateConfig: Mount table database
- ServerConfig: Plugin socket
- LoggingConfig: Logging behavior
- PluginConfig: Main config aggregating all sub-configs

Environment variable prefix: GLUSTERVOL_
Example: GLUSTERVOL_HEKETI_URL=http://heketi:8080
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HeketiConfig(BaseSettings):
    """Heketi REST manager configuration."""

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_HEKETI_")

    url: str = Field(default="http://localhost:8080", description="Heketi base URL")

    # JWT credentials - empty secret forces explicit configuration
    user: str = Field(default="admin", description="Token issuer")
    secret: str = Field(default="", description="Shared JWT secret (required)")
    token_ttl: int = Field(default=30, description="Token lifetime (seconds)")

    # Async operation polling
    poll_interval: float = Field(default=1.0, description="Delay between polls (seconds)")
    max_polls: int = Field(
        default=600,
        description="Polls allowed before an operation is considered stuck",
    )

    timeout: float = Field(default=30.0, description="HTTP call timeout (seconds)")


class VolumeConfig(BaseSettings):
    """Defaults for volumes created through the plugin."""

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_VOLUME_")

    default_size: int = Field(default=1, description="Size used when Opts.size is absent")
    replica: int | None = Field(
        default=None,
        description="Replica count requested when Opts.replica is absent",
    )
    replicate: bool = Field(
        default=False,
        description="Request replication at the manager's default count when no replica is given",
    )


class GlusterCliConfig(BaseSettings):
    """gluster CLI backend configuration."""

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_GLUSTER_")

    binary: str = Field(default="gluster", description="gluster executable")
    replica: int = Field(default=3, description="Replica count for new volumes")
    bricks: list[str] = Field(
        default=[],
        description="Brick roots as host:/path, one brick per volume is created under each",
    )
    force: bool = Field(default=False, description="Pass 'force' to volume create")


class StateConfig(BaseSettings):
    """Local state configuration."""

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_STATE_")

    database_url: str = Field(
        default="sqlite+aiosqlite:///glustervol.db",
        description="Mount table database URL",
    )
    echo: bool = False


class ServerConfig(BaseSettings):
    """Plugin socket configuration."""

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_SERVER_")

    socket: str = Field(default="glusterfs.sock", description="Unix socket path")


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Supports both text and JSON formats:
    - text: Human-readable for local development
    - json: Structured logging for production (log aggregation)
    """

    model_config = SettingsConfigDict(env_prefix="GLUSTERVOL_LOGGING_")

    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="text", description="Log format (text, json)")
    service_name: str = Field(default="glustervol", description="Service identifier in logs")


class PluginConfig(BaseSettings):
    """Main plugin configuration aggregating all sub-configs.

    Environment variable prefix: GLUSTERVOL_
    Sub-configs use their own prefixes (GLUSTERVOL_HEKETI_, GLUSTERVOL_STATE_, etc.)
    """

    model_config = SettingsConfigDict(
        env_prefix="GLUSTERVOL_",
        env_nested_delimiter="__",
    )

    backend: Literal["heketi", "gluster_cli"] = Field(
        default="heketi",
        description="Volume backend implementation",
    )

    # Sub-configurations
    heketi: HeketiConfig = Field(default_factory=HeketiConfig)
    volume: VolumeConfig = Field(default_factory=VolumeConfig)
    gluster: GlusterCliConfig = Field(default_factory=GlusterCliConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_plugin_config() -> PluginConfig:
    """Get cached plugin configuration singleton."""
    return PluginConfig()
