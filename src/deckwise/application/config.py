from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from deckwise.domain.algorithms.registry import ALGORITHMS
from deckwise.domain.constants import DEFAULT_ALGORITHM, DEFAULT_NEW_CARDS_PER_DAY

CONFIG_DIR = Path(".config/deckwise")


def config_file_path() -> Path:
    return Path.home() / CONFIG_DIR / "config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for deckwise.
    Supports loading from:
    1. Config file (~/.config/deckwise/config.toml)
    2. Environment variables (DECKWISE_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="DECKWISE_",
        extra="ignore",
    )

    # Paths
    data_file: Path = Field(default_factory=lambda: Path.home() / CONFIG_DIR / "decks.json")
    log_dir: Path = Field(default_factory=lambda: Path.home() / CONFIG_DIR / "logs")

    # Deck defaults
    default_algorithm: str = DEFAULT_ALGORITHM
    default_new_cards_per_day: int = Field(default=DEFAULT_NEW_CARDS_PER_DAY, ge=0)

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

        # Earlier sources take priority: CLI overrides, then env, then the file
        toml_file = config_file_path()
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_file", "log_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("default_algorithm")
    @classmethod
    def known_algorithm(cls, v: str) -> str:
        if v not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm '{v}'. Available: {', '.join(ALGORITHMS)}")
        return v


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/deckwise/config.toml (if exists)
    3. Environment variables (DECKWISE_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
