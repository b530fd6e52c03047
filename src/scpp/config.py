"""Configuration models and loading logic."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from scpp.errors import ConfigLoadError

if TYPE_CHECKING:
    from scpp.cli import CliFlags

DEFAULT_SETTINGS_FILE = Path("scpp.yaml")
SETTINGS_FILE_ENV = "SCPP_SETTINGS_FILE"


class PackSettings(BaseSettings):
    """Top-level packaging settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    entry: str = Field(min_length=1)
    output: str = Field(min_length=1)
    extension: str = "zip"
    destination: str = Field(min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="SCPP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("extension")
    @classmethod
    def _strip_extension_dot(cls, value: str) -> str:
        stripped = value.strip().lstrip(".")
        if not stripped:
            raise ValueError("extension must not be empty")
        return stripped

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML values while allowing env vars to override them."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, object]:
        """Return settings as a plain dictionary."""

        return self.model_dump(mode="json")


@dataclass(frozen=True, slots=True)
class PackConfig:
    """Resolved, immutable inputs for one packaging run."""

    entry_path: Path
    output_name: str
    extension: str
    destination_dir: Path

    @property
    def destination_path(self) -> Path:
        return self.destination_dir / f"{self.output_name}.{self.extension}"


def find_project_root(start: Path | None = None) -> Path:
    """Locate the directory holding the settings file by walking upward."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / DEFAULT_SETTINGS_FILE).exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> PackSettings:
    """Load settings from the YAML file with environment variable overrides."""

    settings_file = resolve_settings_file(config_file)
    if not settings_file.is_file():
        raise ConfigLoadError(f"settings file not found: {settings_file}")
    PackSettings._yaml_file_override = settings_file
    try:
        return PackSettings()  # type: ignore[call-arg]
    finally:
        PackSettings._yaml_file_override = None


def _absolute(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base_dir / path).resolve()


def resolve_pack_config(
    settings: PackSettings,
    flags: CliFlags | None = None,
    base_dir: Path | None = None,
) -> PackConfig:
    """Apply CLI overrides and resolve entry/destination to absolute paths."""

    root = (base_dir or Path.cwd()).resolve()
    entry = settings.entry
    output = settings.output
    destination = settings.destination
    if flags is not None:
        entry = flags.entry or entry
        output = flags.output or output
        destination = flags.dest or destination

    return PackConfig(
        entry_path=_absolute(entry, root),
        output_name=output,
        extension=settings.extension,
        destination_dir=_absolute(destination, root),
    )
