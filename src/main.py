from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
from typing import Any

import httpx
from dotenv import load_dotenv
from rich import print as console_print
from rich.logging import RichHandler
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.browser.errors import DriverError, HubNotReady
from src.driver.action_queue import ActionQueue
from src.driver.config import DriverConfig
from src.driver.steps import Continuation

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Smoke test for the Selenium action queue")
    parser.add_argument("--server", help="Remote WebDriver hub URL")
    parser.add_argument("--browser", help="Browser name: chrome, firefox or edge")
    parser.add_argument("--url", help="Page to open once the hub is ready")
    parser.add_argument("--xpath", help="Element to wait for and print the text of")
    parser.add_argument("--timeout", type=int, help="Per-step timeout in milliseconds")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, max=4),
    reraise=True,
)
async def _probe(url: str, transport: httpx.AsyncBaseTransport | None) -> int:
    async with httpx.AsyncClient(timeout=5, transport=transport) as client:
        response = await client.get(url)
    logger.info("Hub health response status: %s", response.status_code)
    return response.status_code


async def check_ready(url: str, transport: httpx.AsyncBaseTransport | None = None) -> int:
    """Any HTTP answer from the hub counts as ready."""
    try:
        return await _probe(url, transport)
    except httpx.TransportError as exc:
        raise HubNotReady(f"Selenium Server not running? ({url}: {exc})") from exc


def build_smoke_queue(queue: ActionQueue, url: str, xpath: str | None, found: dict[str, Any]) -> ActionQueue:
    queue.go_to(url)
    if xpath:

        def keep_text(text: str, proceed: Continuation) -> None:
            found["text"] = text
            proceed()

        queue.wait_for(xpath).get_text(xpath, keep_text)
    return queue


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    config = DriverConfig.from_env(load_env_file=False)
    if args.server:
        config.server = args.server
    if args.browser:
        config.browser = args.browser
    if args.timeout is not None:
        config.default_timeout_ms = args.timeout

    await check_ready(config.health_url)
    console_print("Go!")

    if not args.url:
        return {"success": True, "steps": 0, "error": None}

    found: dict[str, Any] = {}
    outcome: dict[str, Any] = {}
    queue = ActionQueue(config=config)
    try:
        build_smoke_queue(queue, args.url, args.xpath, found)
        await queue.run(lambda error: outcome.update(error=error))
    finally:
        with contextlib.suppress(Exception):
            await queue.close_session()

    error = outcome.get("error")
    return {"success": error is None, "steps": len(queue), "error": error, **found}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parse_args(argv)
    verbose = args.verbose or os.getenv("VERBOSE", "0").lower() in {"1", "true", "yes", "on"}
    _configure_logging(verbose)

    try:
        result = asyncio.run(_run(args))
    except DriverError as exc:
        console_print(f"[red]{exc}[/red]")
        return 1

    console_print("\n" + "=" * 60)
    if result["success"]:
        console_print("✅ SMOKE TEST PASSED")
    else:
        console_print("❌ SMOKE TEST FAILED")
    console_print(f"Steps queued: {result['steps']}")
    if "text" in result:
        console_print(f"Text: {result['text']}")
    if result["error"]:
        console_print(f"Error: {result['error']}")
    console_print("=" * 60 + "\n")
    return 0 if result["success"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
