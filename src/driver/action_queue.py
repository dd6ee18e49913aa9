from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from src.browser.session import BrowserElement, BrowserSession
from src.browser.webdriver_session import connect
from src.driver.config import DriverConfig
from src.driver.series import run_series
from src.driver.steps import (
    CompletionCallback,
    Continuation,
    ErrorHandler,
    Step,
    StepBody,
    StepKind,
    accepts_continuation,
    default_error_handler,
    maybe_await,
)

logger = logging.getLogger(__name__)

ElementsCallback = Callable[[list[BrowserElement] | None, Continuation], Any]
TextCallback = Callable[[str, Continuation], Any]
CustomWork = Callable[[BrowserSession, Continuation], Any]


class ActionQueue:
    """Fluent builder of browser steps that run strictly in order.

    Builder methods only record a step and return the queue; nothing touches
    the browser until `run` is awaited. If no session is given, a new Remote
    WebDriver session is started from `config`. A session passed in is used as
    is and may be shared with other queues.
    """

    def __init__(self, session: BrowserSession | None = None, config: DriverConfig | None = None) -> None:
        config = config or DriverConfig()
        self.owns_session = session is None
        if session is None:
            session = connect(config.server, config.browser, poll_interval_ms=config.poll_interval_ms)
        self.session: BrowserSession = session
        self.default_timeout_ms = config.default_timeout_ms
        self.error_handler: ErrorHandler = default_error_handler
        self._steps: list[Step] = []

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def set_error_func(self, handler: ErrorHandler) -> None:
        """Route later step failures to `handler(error)`.

        A handler taking a second argument is called as `handler(error, proceed)`
        and may call `proceed()` to resume with the next step. If it returns
        without doing so, the run stops with `QueueHalted`.
        """
        self.error_handler = handler

    def concat(self, other: ActionQueue) -> None:
        self._steps.extend(other._steps)

    async def run(self, on_done: CompletionCallback | None = None) -> ActionQueue:
        logger.info("Running %d queued steps", len(self._steps))
        error = await run_series(list(self._steps))
        if error is not None:
            logger.info("Queue stopped early: %s", error)
        if on_done is not None:
            await maybe_await(on_done(error))
        return self

    async def close_session(self) -> None:
        await self.session.close()

    def go_to(self, url: str) -> ActionQueue:
        async def body(proceed: Continuation) -> None:
            try:
                await self.session.navigate(url)
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            proceed()

        return self._append(StepKind.NAVIGATE, f"go_to {url}", body)

    def sleep(self, duration_ms: int) -> ActionQueue:
        if duration_ms < 0:
            raise ValueError(f"sleep duration must not be negative, got {duration_ms}")

        async def body(proceed: Continuation) -> None:
            await asyncio.sleep(duration_ms / 1000)
            proceed()

        return self._append(StepKind.SLEEP, f"sleep {duration_ms}ms", body)

    def click(self, locator: str, timeout: int | None = None) -> ActionQueue:
        timeout_ms = self._timeout(timeout)

        async def body(proceed: Continuation) -> None:
            try:
                element = await self.session.locate(locator, timeout_ms)
                await element.click()
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            proceed()

        return self._append(StepKind.CLICK, f"click {locator}", body)

    def click_elem(self, element: BrowserElement, timeout: int | None = None) -> ActionQueue:
        """Click an element resolved earlier; `timeout` is unused."""

        async def body(proceed: Continuation) -> None:
            try:
                await element.click()
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            proceed()

        return self._append(StepKind.CLICK_ELEM, f"click_elem {element!r}", body)

    def send_keys(self, locator: str, text: str, timeout: int | None = None) -> ActionQueue:
        timeout_ms = self._timeout(timeout)

        async def body(proceed: Continuation) -> None:
            try:
                element = await self.session.locate(locator, timeout_ms)
                await element.send_keys(text)
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            proceed()

        return self._append(StepKind.SEND_KEYS, f"send_keys {locator}", body)

    def get_all_elements(
        self,
        locator: str,
        allow_skip: bool,
        callback: ElementsCallback,
        timeout: int | None = None,
    ) -> ActionQueue:
        """Hand every element matching `locator` to `callback(elements, proceed)`.

        With `allow_skip`, finding nothing is not a failure: the callback gets
        `None` instead. The callback decides when the queue moves on.
        """
        timeout_ms = self._timeout(timeout)

        async def body(proceed: Continuation) -> None:
            try:
                elements = await self.session.locate_all(locator, timeout_ms)
            except Exception as exc:
                if not allow_skip:
                    await self._route_error(exc, proceed)
                    return
                logger.debug("Nothing matched %s, skipping: %s", locator, exc)
                elements = None
            await maybe_await(callback(elements, proceed))

        return self._append(StepKind.GET_ALL_ELEMENTS, f"get_all_elements {locator}", body)

    def get_text(self, locator: str, callback: TextCallback, timeout: int | None = None) -> ActionQueue:
        timeout_ms = self._timeout(timeout)

        async def body(proceed: Continuation) -> None:
            try:
                element = await self.session.locate(locator, timeout_ms)
                text = await element.get_text()
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            await maybe_await(callback(text, proceed))

        return self._append(StepKind.GET_TEXT, f"get_text {locator}", body)

    def get_text_from_elem(
        self,
        element: BrowserElement,
        callback: TextCallback,
        timeout: int | None = None,
    ) -> ActionQueue:
        async def body(proceed: Continuation) -> None:
            try:
                text = await element.get_text()
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            await maybe_await(callback(text, proceed))

        return self._append(StepKind.GET_TEXT_FROM_ELEM, f"get_text_from_elem {element!r}", body)

    def wait_for(self, locator: str, timeout: int | None = None) -> ActionQueue:
        timeout_ms = self._timeout(timeout)

        async def body(proceed: Continuation) -> None:
            try:
                await self.session.locate(locator, timeout_ms)
            except Exception as exc:
                await self._route_error(exc, proceed)
                return
            proceed()

        return self._append(StepKind.WAIT_FOR, f"wait_for {locator}", body)

    def custom(self, work: CustomWork) -> ActionQueue:
        """Queue `work(session, proceed)`; it must call `proceed` itself."""

        async def body(proceed: Continuation) -> None:
            await maybe_await(work(self.session, proceed))

        name = getattr(work, "__name__", type(work).__name__)
        return self._append(StepKind.CUSTOM, f"custom {name}", body)

    def _append(self, kind: StepKind, label: str, body: StepBody) -> ActionQueue:
        self._steps.append(Step(kind=kind, label=label, body=body))
        return self

    def _timeout(self, timeout: int | None) -> int:
        return self.default_timeout_ms if timeout is None else timeout

    async def _route_error(self, error: BaseException, proceed: Continuation) -> None:
        logger.warning("Step %d (%s) failed: %s", proceed.step_index, proceed.label, error)
        if accepts_continuation(self.error_handler):
            await maybe_await(self.error_handler(error, proceed))
        else:
            await maybe_await(self.error_handler(error))
        if not proceed.called:
            proceed.halt(error)
