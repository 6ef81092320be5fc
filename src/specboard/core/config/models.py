"""
Configuration data models for specboard.

These models define the structure of .specboard.json and
~/.config/specboard/config.json files, with validation via Pydantic.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatchConfig(BaseModel):
    """
    Change pipeline timing.

    The poll interval bounds how quickly an edit is noticed; the debounce
    window bounds how many re-scans a burst of edits costs.
    """
    debounce_ms: int = Field(
        default=300,
        ge=0,
        description="Quiet period after the last change before re-scanning"
    )
    poll_interval_ms: int = Field(
        default=300,
        ge=10,
        description="Milliseconds between filesystem polls"
    )
    depth: int = Field(
        default=3,
        ge=0,
        description="Maximum watched directory depth below the project root"
    )
    ignore_hidden: bool = Field(
        default=True,
        description="Ignore dot-files and dot-directories"
    )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000


class ServerConfig(BaseModel):
    """Dashboard HTTP server settings."""
    host: str = Field(
        default="127.0.0.1",
        description="Interface to bind"
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to bind"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
        description="Origins allowed to call the API from a browser"
    )


class PathsConfig(BaseModel):
    """
    Path-safety gate settings.

    Every path received over HTTP must resolve inside one of these roots.
    """
    allowed_roots: list[str] = Field(
        default_factory=list,
        description="Allowed root directories (empty uses home, /Users and /home)"
    )


class RegistryConfig(BaseModel):
    """Project registry and recent-projects storage."""
    path: str | None = Field(
        default=None,
        description="Registry JSON file (defaults under the user config dir)"
    )
    recent_path: str | None = Field(
        default=None,
        description="Recent projects JSON file (defaults under the user config dir)"
    )
    recent_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of recent projects kept"
    )

    @field_validator("path", "recent_path", mode="before")
    @classmethod
    def expand_user(cls, v: str | Path | None) -> str | None:
        """Expand ~ in configured file paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class SpecboardConfig(BaseModel):
    """
    Top-level specboard configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = SpecboardConfig(watch=WatchConfig(debounce_ms=500))
        >>> config.watch.debounce_seconds
        0.5
        >>> config.server.port
        8080
    """
    watch: WatchConfig = Field(
        default_factory=WatchConfig,
        description="Change pipeline timing"
    )
    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="Dashboard server settings"
    )
    paths: PathsConfig = Field(
        default_factory=PathsConfig,
        description="Path-safety gate"
    )
    registry: RegistryConfig = Field(
        default_factory=RegistryConfig,
        description="Project registry storage"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )
