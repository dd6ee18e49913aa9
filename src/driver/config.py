from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.browser.errors import ConfigError

DEFAULT_BROWSER = "chrome"
DEFAULT_SERVER = "http://127.0.0.1:4444/wd/hub"
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_HEALTH_PATH = "/static/resource/hub.html"


@dataclass(slots=True)
class DriverConfig:
    browser: str = DEFAULT_BROWSER
    server: str = DEFAULT_SERVER
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    health_path: str = DEFAULT_HEALTH_PATH
    poll_interval_ms: int = 100

    @property
    def health_url(self) -> str:
        return self.server.rstrip("/") + "/" + self.health_path.lstrip("/")

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> DriverConfig:
        if load_env_file:
            load_dotenv()
        return cls(
            browser=os.getenv("SELENIUM_BROWSER", DEFAULT_BROWSER).strip() or DEFAULT_BROWSER,
            server=os.getenv("SELENIUM_SERVER", DEFAULT_SERVER).strip() or DEFAULT_SERVER,
            default_timeout_ms=_env_int("ACTION_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            health_path=os.getenv("SELENIUM_HEALTH_PATH", DEFAULT_HEALTH_PATH),
            poll_interval_ms=_env_int("POLL_INTERVAL_MS", 100),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value
