from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.browser.errors import QueueHalted

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    NAVIGATE = "navigate"
    SLEEP = "sleep"
    CLICK = "click"
    CLICK_ELEM = "click_elem"
    SEND_KEYS = "send_keys"
    WAIT_FOR = "wait_for"
    GET_TEXT = "get_text"
    GET_TEXT_FROM_ELEM = "get_text_from_elem"
    GET_ALL_ELEMENTS = "get_all_elements"
    CUSTOM = "custom"


class Continuation:
    """Signals that a step is finished and the queue may move on.

    Calling it with an error stops the run with that error. Only the first
    call counts; later calls are logged and ignored.
    """

    def __init__(self, future: asyncio.Future[BaseException | None], step_index: int, label: str) -> None:
        self._future = future
        self.step_index = step_index
        self.label = label

    def __call__(self, error: BaseException | None = None) -> None:
        if self._future.done():
            logger.warning("Continuation of step %d (%s) called more than once", self.step_index, self.label)
            return
        self._future.set_result(error)

    def halt(self, cause: BaseException | None) -> None:
        if not self._future.done():
            self._future.set_result(QueueHalted(self.step_index, self.label, cause))

    @property
    def called(self) -> bool:
        return self._future.done()


StepBody = Callable[[Continuation], Awaitable[None]]
ErrorHandler = Callable[..., Any]
CompletionCallback = Callable[[BaseException | None], Any]


@dataclass(frozen=True, slots=True)
class Step:
    kind: StepKind
    label: str
    body: StepBody


def default_error_handler(error: BaseException, proceed: Continuation) -> None:
    logger.error("Step %d (%s) failed: %s", proceed.step_index, proceed.label, error)


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def accepts_continuation(handler: ErrorHandler) -> bool:
    """True when `handler` can be called as `handler(error, proceed)`."""
    try:
        parameters = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = 0
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2
