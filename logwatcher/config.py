"""logwatcher — Settings.

Settings are loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. Environment variables prefixed with LOGWATCHER_
    3. System config: /etc/logwatcher/config.yaml
    4. User config:   ~/.config/logwatcher/config.yaml
    5. The file passed with ``--config``

Settings supply the fallbacks the command line may leave out (log file,
keywords, command, interval) and the hard limits every run is clamped to.
Command-line values always win over settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logwatcher.exceptions import ConfigurationError

# Hard limits, in seconds.
MIN_INTERVAL_SECONDS = 5
MAX_INTERVAL_SECONDS = 3600
MAX_TIMEOUT_SECONDS = 7 * 24 * 3600
DEFAULT_INTERVAL_SECONDS = 60
SINGLE_SHOT_EPSILON_SECONDS = 1


# ---------------------------------------------------------------------------
# Sub-configuration blocks
# ---------------------------------------------------------------------------


class DefaultsConfig(BaseModel):
    """Values used when the command line does not provide one."""

    logfile: Path | None = Field(
        default=None,
        description="Log file watched when --logfile is not given.",
    )
    keywords: list[str] = Field(
        default_factory=list,
        description="Keywords used when no --catch option is given.",
    )
    command: str = Field(
        default="",
        description="Command executed when --execute is not given.",
    )
    interval_seconds: Annotated[int, Field(ge=1)] = DEFAULT_INTERVAL_SECONDS


class LimitsConfig(BaseModel):
    min_interval_seconds: Annotated[int, Field(ge=1)] = MIN_INTERVAL_SECONDS
    max_interval_seconds: Annotated[int, Field(ge=1)] = MAX_INTERVAL_SECONDS
    max_timeout_seconds: Annotated[int, Field(ge=1)] = MAX_TIMEOUT_SECONDS
    single_shot_epsilon_seconds: Annotated[int, Field(ge=1)] = Field(
        default=SINGLE_SHOT_EPSILON_SECONDS,
        description=(
            "Slack added to the single-shot timeout.  Must stay below "
            "min_interval_seconds so that exactly one check runs."
        ),
    )

    @model_validator(mode="after")
    def _check_ordering(self) -> "LimitsConfig":
        if self.min_interval_seconds > self.max_interval_seconds:
            raise ValueError("min_interval_seconds must not exceed max_interval_seconds")
        if self.max_interval_seconds > self.max_timeout_seconds:
            raise ValueError("max_interval_seconds must not exceed max_timeout_seconds")
        if self.single_shot_epsilon_seconds >= self.min_interval_seconds:
            raise ValueError("single_shot_epsilon_seconds must be below min_interval_seconds")
        return self


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOGWATCHER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    check_parent: bool = Field(
        default=True,
        description=(
            "Abort when the parent process dies.  When True, a parent PID "
            "that cannot be determined is a startup error."
        ),
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from YAML files + environment variables.

        Nested blocks are merged key by key, so a later file may override a
        single limit without restating the rest of its block.

        Raises:
            ConfigurationError: a file cannot be read or parsed, or the merged
                values fail validation.
        """
        data: dict[str, Any] = {}
        candidates = [
            Path("/etc/logwatcher/config.yaml"),
            Path.home() / ".config" / "logwatcher" / "config.yaml",
        ]
        if config_file:
            candidates.append(config_file)
        for path in candidates:
            if path.exists():
                import yaml  # lazy: only needed when a file exists

                try:
                    with path.open() as f:
                        loaded = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as exc:
                    raise ConfigurationError(
                        f"Cannot read the settings file '{path}': {exc}", option="--config"
                    ) from exc
                if not isinstance(loaded, dict):
                    raise ConfigurationError(
                        f"The settings file '{path}' must contain a mapping", option="--config"
                    )
                _merge(data, loaded)
        try:
            return cls(**data)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid settings: {problems}", option="--config") from exc


def _merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


# Module-level singleton, replaced by ``Settings.load()`` at startup.
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def override_settings(settings: Settings | None) -> None:
    """Replace the module-level singleton. Used in tests."""
    global _settings
    _settings = settings
