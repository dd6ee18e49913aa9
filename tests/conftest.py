"""In-memory browser session used by the queue tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from src.browser.errors import ElementInteractionError, LocatorTimeout, NavigationError


class FakeElement:
    def __init__(self, text: str = "", fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.clicks = 0
        self.typed: list[str] = []

    async def click(self) -> None:
        if self.fail:
            raise ElementInteractionError("click", "element is stale")
        self.clicks += 1

    async def send_keys(self, text: str) -> None:
        if self.fail:
            raise ElementInteractionError("send keys to", "element is stale")
        self.typed.append(text)

    async def get_text(self) -> str:
        if self.fail:
            raise ElementInteractionError("read text of", "element is stale")
        return self.text


class FakeSession:
    """Resolves XPath strings against a dict, polling until a timeout like a real driver."""

    poll_seconds = 0.005

    def __init__(self) -> None:
        self.pages: dict[str, list[FakeElement]] = {}
        self.visited: list[str] = []
        self.unreachable: set[str] = set()
        self.locate_calls: list[tuple[str, int]] = []
        self.closed = False

    def place(self, xpath: str, *texts: str) -> list[FakeElement]:
        elements = [FakeElement(text) for text in texts or ("",)]
        self.pages.setdefault(xpath, []).extend(elements)
        return elements

    async def navigate(self, url: str) -> None:
        if url in self.unreachable:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        self.visited.append(url)

    async def locate(self, xpath: str, timeout_ms: int) -> FakeElement:
        self.locate_calls.append((xpath, timeout_ms))
        elements = await self._poll(xpath, timeout_ms)
        return elements[0]

    async def locate_all(self, xpath: str, timeout_ms: int) -> list[FakeElement]:
        self.locate_calls.append((xpath, timeout_ms))
        return list(await self._poll(xpath, timeout_ms))

    async def close(self) -> None:
        self.closed = True

    async def _poll(self, xpath: str, timeout_ms: int) -> list[FakeElement]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        while True:
            if self.pages.get(xpath):
                return self.pages[xpath]
            if loop.time() >= deadline:
                raise LocatorTimeout(xpath, timeout_ms)
            await asyncio.sleep(self.poll_seconds)


class ErrorRecorder:
    """Error handler that records failures and optionally resumes the queue."""

    def __init__(self, resume: bool = False) -> None:
        self.resume = resume
        self.errors: list[BaseException] = []

    def __call__(self, error: BaseException, proceed: Any) -> None:
        self.errors.append(error)
        if self.resume:
            proceed()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def recorder() -> ErrorRecorder:
    return ErrorRecorder()


@pytest.fixture
def resuming_recorder() -> ErrorRecorder:
    return ErrorRecorder(resume=True)
