from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from senko.domain.constants import HEATMAP_DAYS_BACK, SEQUENCE_TIMEOUT

CONFIG_FILES = (
    Path(".config/senko/config.toml"),
    Path(".senko.toml"),
)


def config_candidates() -> list[Path]:
    return [Path.home() / rel for rel in CONFIG_FILES]


class AppConfig(BaseSettings):
    """
    Configuration model for senko.
    Supports loading from:
    1. Environment variables (SENKO_*)
    2. Config file (~/.config/senko/config.toml or ~/.senko.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="SENKO_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".config/senko/data")

    # Study
    sequence_timeout: float = Field(default=SEQUENCE_TIMEOUT, gt=0)

    # Stats
    heatmap_days: int = Field(default=HEATMAP_DAYS_BACK, ge=1)

    # Server
    host: str = "127.0.0.1"
    port: int = 8787

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

        # First existing file wins; earlier sources take precedence.
        toml_file = next((f for f in config_candidates() if f.exists()), None)

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

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/senko/config.toml (if exists)
    3. Environment variables (SENKO_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
