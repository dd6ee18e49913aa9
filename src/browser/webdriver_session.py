from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from urllib3.exceptions import HTTPError as TransportHTTPError

from src.browser.errors import (
    ElementInteractionError,
    LocatorTimeout,
    NavigationError,
    SessionError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BROWSER_OPTIONS: dict[str, Callable[[], Any]] = {
    "chrome": webdriver.ChromeOptions,
    "firefox": webdriver.FirefoxOptions,
    "edge": webdriver.EdgeOptions,
}


def connect(server_url: str, browser: str = "chrome", poll_interval_ms: int = 100) -> WebDriverSession:
    """Open a Remote WebDriver session on a Selenium hub."""
    options_factory = _BROWSER_OPTIONS.get(browser.strip().lower())
    if options_factory is None:
        supported = ", ".join(sorted(_BROWSER_OPTIONS))
        raise SessionError(server_url, browser, f"unsupported browser (expected one of: {supported})")

    logger.info("Starting %s session on %s", browser, server_url)
    try:
        driver = webdriver.Remote(command_executor=server_url, options=options_factory())
    except WebDriverException as exc:
        raise SessionError(server_url, browser, exc.msg or type(exc).__name__) from exc
    except (TransportHTTPError, OSError) as exc:
        raise SessionError(server_url, browser, str(exc) or type(exc).__name__) from exc
    return WebDriverSession(driver, poll_interval_ms=poll_interval_ms)


class WebDriverElement:
    def __init__(self, element: WebElement) -> None:
        self.element = element

    async def click(self) -> None:
        await _interact("click", self.element.click)

    async def send_keys(self, text: str) -> None:
        await _interact("send keys to", lambda: self.element.send_keys(text))

    async def get_text(self) -> str:
        return await _interact("read text of", lambda: self.element.text)

    def __repr__(self) -> str:
        return f"WebDriverElement(id={self.element.id!r})"


class WebDriverSession:
    """Async facade over a blocking Selenium driver.

    Every driver call runs in a worker thread so a pending step never blocks
    the event loop. Element lookups wait through `WebDriverWait`, polling every
    `poll_interval_ms` until the timeout expires.
    """

    def __init__(self, driver: WebDriver, poll_interval_ms: int = 100) -> None:
        self.driver = driver
        self.poll_interval_ms = poll_interval_ms

    async def navigate(self, url: str) -> None:
        try:
            await asyncio.to_thread(self.driver.get, url)
        except WebDriverException as exc:
            raise NavigationError(url, exc.msg or type(exc).__name__) from exc

    async def locate(self, xpath: str, timeout_ms: int) -> WebDriverElement:
        element = await self._wait(
            xpath,
            timeout_ms,
            EC.presence_of_element_located((By.XPATH, xpath)),
        )
        return WebDriverElement(element)

    async def locate_all(self, xpath: str, timeout_ms: int) -> list[WebDriverElement]:
        # presence_of_all_elements_located keeps polling while the match list is empty
        elements = await self._wait(
            xpath,
            timeout_ms,
            EC.presence_of_all_elements_located((By.XPATH, xpath)),
        )
        return [WebDriverElement(element) for element in elements]

    async def close(self) -> None:
        await asyncio.to_thread(self.driver.quit)

    async def _wait(self, xpath: str, timeout_ms: int, condition: Callable[[WebDriver], T]) -> T:
        wait = WebDriverWait(
            self.driver,
            timeout=max(timeout_ms, 0) / 1000,
            poll_frequency=max(self.poll_interval_ms, 1) / 1000,
        )
        try:
            return await asyncio.to_thread(wait.until, condition)
        except TimeoutException as exc:
            raise LocatorTimeout(xpath, timeout_ms) from exc
        except WebDriverException as exc:
            raise ElementInteractionError("locate", exc.msg or type(exc).__name__) from exc


async def _interact(action: str, call: Callable[[], T]) -> T:
    try:
        return await asyncio.to_thread(call)
    except WebDriverException as exc:
        raise ElementInteractionError(action, exc.msg or type(exc).__name__) from exc
