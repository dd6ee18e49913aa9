from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from src.driver.steps import Continuation, Step

logger = logging.getLogger(__name__)


async def run_series(steps: Sequence[Step]) -> BaseException | None:
    """Run steps one after another, each waiting for the previous continuation.

    Returns the first error a continuation was called with (a `QueueHalted`
    when a failure was not advanced past), or None when every step proceeded.
    Exceptions raised by a step body propagate unchanged.
    """
    loop = asyncio.get_running_loop()
    for index, step in enumerate(steps):
        advanced: asyncio.Future[BaseException | None] = loop.create_future()
        proceed = Continuation(advanced, index, step.label)
        logger.debug("Step %d started: %s", index, step.label)

        body = asyncio.ensure_future(step.body(proceed))
        try:
            await asyncio.wait({advanced, body}, return_when=asyncio.FIRST_COMPLETED)
            if body.done():
                body.result()
            else:
                body.add_done_callback(_report_detached_failure)
            # the body may hand its continuation to a callback that fires later
            error = await advanced
        except asyncio.CancelledError:
            body.cancel()
            raise

        if error is not None:
            logger.debug("Step %d ended the run: %s", index, error)
            return error
        logger.debug("Step %d finished", index)
    return None


def _report_detached_failure(task: asyncio.Future[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Step body failed after its continuation was called: %r", exc)
