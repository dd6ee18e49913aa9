"""Capabilities the action queue needs from a browser driver.

The queue only talks to these protocols, so any driver that can navigate,
locate elements by XPath with a timeout, click, type and read text can back
it. `WebDriverSession` is the Selenium implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BrowserElement(Protocol):
    async def click(self) -> None: ...

    async def send_keys(self, text: str) -> None: ...

    async def get_text(self) -> str:
        """Visible text of the element and all of its descendants."""
        ...


@runtime_checkable
class BrowserSession(Protocol):
    async def navigate(self, url: str) -> None: ...

    async def locate(self, xpath: str, timeout_ms: int) -> BrowserElement:
        """Wait until one element matches, raising LocatorTimeout otherwise."""
        ...

    async def locate_all(self, xpath: str, timeout_ms: int) -> list[BrowserElement]:
        """Wait until one or more elements match, raising LocatorTimeout otherwise."""
        ...

    async def close(self) -> None: ...
