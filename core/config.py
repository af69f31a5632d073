"""
Configuration for Service D.

Settings are read from the environment, with a local ``.env`` file loaded
first so development overrides do not need to be exported by hand.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_STATIC_DIR = PROJECT_ROOT / "wwwroot"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the HTTP listener."""
    host: str = "0.0.0.0"
    port: int = 8000
    static_dir: Path = DEFAULT_STATIC_DIR
    log_level: str = "INFO"
    enable_metrics: bool = True
    enable_tracing: bool = False
    otlp_endpoint: str = "localhost:4317"
    service_name: str = "service-d"

    def with_overrides(self, **overrides) -> "Settings":
        """
        Return a copy with every non-None override applied.

        Used by the command line, where an omitted flag means "keep the
        environment value".
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "static_dir" in changes:
            changes["static_dir"] = Path(changes["static_dir"])
        if "port" in changes:
            changes["port"] = validate_port(changes["port"], "port")
        if "log_level" in changes:
            changes["log_level"] = validate_log_level(changes["log_level"], "log_level")
        return replace(self, **changes)


def validate_port(value, name="PORT") -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not 1 <= port <= 65535:
        raise ValueError(f"{name} must be between 1 and 65535, got {port}")
    return port


def validate_log_level(value, name="LOG_LEVEL") -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


def _env_flag(env, name: str, default: str) -> bool:
    return env.get(name, default).lower() == "true"


def get_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ (dict, optional): Mapping to read instead of ``os.environ``

    Returns:
        Settings: Parsed settings

    Raises:
        ValueError: If PORT or LOG_LEVEL hold an invalid value
    """
    env = os.environ if environ is None else environ

    static_dir = env.get("STATIC_DIR")
    return Settings(
        host=env.get("HOST", "0.0.0.0"),
        port=validate_port(env.get("PORT", "8000")),
        static_dir=Path(static_dir) if static_dir else DEFAULT_STATIC_DIR,
        log_level=validate_log_level(env.get("LOG_LEVEL", "INFO")),
        enable_metrics=_env_flag(env, "ENABLE_METRICS", "true"),
        enable_tracing=_env_flag(env, "ENABLE_TRACING", "false"),
        otlp_endpoint=env.get("OTLP_ENDPOINT", "localhost:4317"),
        service_name=env.get("SERVICE_NAME", "service-d"),
    )
