from __future__ import annotations

import pytest

from src.browser.errors import ConfigError
from src.driver.config import DriverConfig

ENV_NAMES = ("SELENIUM_BROWSER", "SELENIUM_SERVER", "ACTION_TIMEOUT_MS", "SELENIUM_HEALTH_PATH", "POLL_INTERVAL_MS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = DriverConfig()

    assert config.browser == "chrome"
    assert config.server == "http://127.0.0.1:4444/wd/hub"
    assert config.default_timeout_ms == 10000
    assert config.health_url == "http://127.0.0.1:4444/wd/hub/static/resource/hub.html"


def test_from_env_without_variables_uses_defaults() -> None:
    assert DriverConfig.from_env(load_env_file=False) == DriverConfig()


def test_from_env_reads_variables(monkeypatch) -> None:
    monkeypatch.setenv("SELENIUM_BROWSER", "firefox")
    monkeypatch.setenv("SELENIUM_SERVER", "http://grid:4444/wd/hub/")
    monkeypatch.setenv("ACTION_TIMEOUT_MS", "3000")
    monkeypatch.setenv("SELENIUM_HEALTH_PATH", "status")
    monkeypatch.setenv("POLL_INTERVAL_MS", "50")

    config = DriverConfig.from_env(load_env_file=False)

    assert config.browser == "firefox"
    assert config.default_timeout_ms == 3000
    assert config.poll_interval_ms == 50
    assert config.health_url == "http://grid:4444/wd/hub/status"


@pytest.mark.parametrize("raw", ["soon", "-5"])
def test_from_env_rejects_bad_timeout(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("ACTION_TIMEOUT_MS", raw)

    with pytest.raises(ConfigError):
        DriverConfig.from_env(load_env_file=False)
