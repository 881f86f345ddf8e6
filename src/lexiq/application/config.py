from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexiq.domain.constants import (
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_NEW_ITEM_RATIO,
    DEFAULT_REQUEST_RETENTION,
    DEFAULT_SESSION_SIZE,
    DEFAULT_WEIGHTS,
    WEIGHT_COUNT,
)
from lexiq.domain.memory.models import FsrsParameters

def config_files() -> list[Path]:
    return [
        Path.home() / ".config/lexiq/config.toml",
        Path.home() / ".lexiq.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for lexiq.
    Supports loading from:
    1. Environment variables (LEXIQ_*)
    2. Config file (~/.config/lexiq/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIQ_",
        extra="ignore",
    )

    # Paths
    state_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/lexiq")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/lexiq/logs")

    # Scheduler
    request_retention: float = Field(default=DEFAULT_REQUEST_RETENTION, gt=0.0, lt=1.0)
    maximum_interval: int = Field(default=DEFAULT_MAXIMUM_INTERVAL, ge=1)
    fsrs_weights: list[float] = Field(default_factory=lambda: list(DEFAULT_WEIGHTS))

    # Sessions
    session_size: int = Field(default=DEFAULT_SESSION_SIZE, ge=0)
    new_item_ratio: float = Field(default=DEFAULT_NEW_ITEM_RATIO, ge=0.0, le=1.0)

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority: CLI > env > file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("fsrs_weights")
    @classmethod
    def check_weight_count(cls, v: list[float]) -> list[float]:
        if len(v) != WEIGHT_COUNT:
            raise ValueError(f"fsrs_weights needs exactly {WEIGHT_COUNT} values, got {len(v)}")
        return v

    @field_validator("state_dir", "log_dir", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    def fsrs_parameters(self) -> FsrsParameters:
        return FsrsParameters(
            request_retention=self.request_retention,
            maximum_interval=self.maximum_interval,
            w=tuple(self.fsrs_weights),
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/lexiq/config.toml (if exists)
    3. Environment variables (LEXIQ_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
