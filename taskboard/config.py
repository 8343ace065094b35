"""Runtime configuration read from ``TASKBOARD_*`` environment variables."""

import logging
import os
from dataclasses import dataclass, field

AUTH_MODES = ("placeholder", "issued")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Server and client settings."""

    title: str = "Taskboard API"
    version: str = "1.0.0"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    seed_demo_data: bool = True
    auth_mode: str = "placeholder"
    api_url: str = "http://127.0.0.1:8000"
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.auth_mode not in AUTH_MODES:
            raise ValueError(f"Invalid auth mode: {self.auth_mode}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment, falling back to defaults."""
        defaults = cls()
        return cls(
            host=os.getenv("TASKBOARD_HOST", defaults.host),
            port=int(os.getenv("TASKBOARD_PORT", str(defaults.port))),
            log_level=os.getenv("TASKBOARD_LOG_LEVEL", defaults.log_level).upper(),
            cors_origins=_env_list("TASKBOARD_CORS_ORIGINS", defaults.cors_origins),
            seed_demo_data=_env_bool("TASKBOARD_SEED_DEMO_DATA", defaults.seed_demo_data),
            auth_mode=os.getenv("TASKBOARD_AUTH_MODE", defaults.auth_mode).lower(),
            api_url=os.getenv("TASKBOARD_API_URL", defaults.api_url),
            request_timeout=float(
                os.getenv("TASKBOARD_REQUEST_TIMEOUT", str(defaults.request_timeout))
            ),
        )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once at process start-up."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
