"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

VALID_THINKING_LEVELS = {"minimal", "low", "medium", "high"}

DEFAULT_ENV_PATH = Path.home() / ".config" / "study-buddy-mcp" / ".env"

MODEL_PRESETS: dict[str, dict[str, str]] = {
    "quality": {
        "default_model": "gemini-3.1-pro-preview",
        "label": "Best notes analysis — 3.1 Pro (slower, lowest rate limits)",
    },
    "fast": {
        "default_model": "gemini-3-flash-preview",
        "label": "Quick turnaround — 3 Flash (highest rate limits)",
    },
}


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def read_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines from *path*.

    Blank lines, ``#`` comments and an ``export`` prefix are tolerated.
    Values are taken literally apart from one layer of surrounding quotes.
    """
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ").strip()
        key, sep, value = line.partition("=")
        if not sep or not key.strip():
            continue
        values[key.strip()] = _strip_quotes(value.strip())
    return values


def load_env_file(path: Path | None = None) -> list[str]:
    """Copy variables from the shared env file into ``os.environ``.

    Only variables that are unset or blank in the process environment are
    filled in. Returns the names that were injected.
    """
    injected: list[str] = []
    for key, value in read_env_file(path or DEFAULT_ENV_PATH).items():
        if os.environ.get(key, "").strip():
            continue
        os.environ[key] = value
        injected.append(key)
    return injected


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


class StudyConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    gemini_api_key: str = Field(default="")
    default_model: str = Field(default="gemini-3-flash-preview")
    default_thinking_level: str = Field(default="low")
    default_temperature: float = Field(default=1.0)
    max_image_bytes: int = Field(default=20 * 1024 * 1024)
    max_sessions: int = Field(default=50)
    session_timeout_hours: int = Field(default=2)
    tracing_enabled: bool = Field(default=False)
    mlflow_tracking_uri: str = Field(default="")
    mlflow_experiment_name: str = Field(default="study-buddy-mcp")

    @field_validator("default_thinking_level")
    @classmethod
    def validate_thinking_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in VALID_THINKING_LEVELS:
            allowed = ", ".join(sorted(VALID_THINKING_LEVELS))
            raise ValueError(f"Invalid thinking level '{value}'. Allowed: {allowed}")
        return level

    @field_validator("max_image_bytes", "max_sessions", "session_timeout_hours")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Configuration values must be >= 1")
        return value

    @field_validator("default_temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError("default_temperature must be between 0.0 and 2.0")
        return value

    @classmethod
    def from_env(cls) -> StudyConfig:
        """Build config from environment variables."""
        tracking_uri = os.getenv("MLFLOW_TRACKING_URI", "")
        tracing_flag = os.getenv("GEMINI_TRACING_ENABLED", "")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            default_model=os.getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
            default_thinking_level=os.getenv("GEMINI_THINKING_LEVEL", "low"),
            default_temperature=float(os.getenv("GEMINI_TEMPERATURE", "1.0")),
            max_image_bytes=int(os.getenv("STUDY_MAX_IMAGE_BYTES", str(20 * 1024 * 1024))),
            max_sessions=int(os.getenv("STUDY_MAX_SESSIONS", "50")),
            session_timeout_hours=int(os.getenv("STUDY_SESSION_TIMEOUT_HOURS", "2")),
            # Explicit "false" wins; otherwise a tracking URI turns tracing on.
            tracing_enabled=tracing_flag.lower() != "false" and bool(tracking_uri),
            mlflow_tracking_uri=tracking_uri,
            mlflow_experiment_name=os.getenv("MLFLOW_EXPERIMENT_NAME", "study-buddy-mcp"),
        )


_config: StudyConfig | None = None


def get_config() -> StudyConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/study-buddy-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the file.
    """
    global _config
    if _config is None:
        injected = load_env_file(DEFAULT_ENV_PATH)
        if injected:
            logger.info("Loaded %d var(s) from config: %s", len(injected), ", ".join(injected))
        _config = StudyConfig.from_env()
    return _config


def update_config(**overrides: object) -> StudyConfig:
    """Patch the live config (used by ``infra_configure`` tool)."""
    global _config
    data = get_config().model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = StudyConfig(**data)
    return _config
