from __future__ import annotations


class DriverError(Exception):
    """Base exception for the action driver."""


class ConfigError(DriverError):
    pass


class SessionError(DriverError):
    """The browser session could not be created or connected."""

    def __init__(self, server: str, browser: str, reason: str) -> None:
        self.server = server
        self.browser = browser
        self.reason = reason
        super().__init__(f"Could not start {browser} session on {server}: {reason}")


class HubNotReady(DriverError):
    pass


class StepError(DriverError):
    """A queued browser operation failed."""


class NavigationError(StepError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to navigate to {url}: {reason}")


class LocatorTimeout(StepError):
    def __init__(self, locator: str, timeout_ms: int) -> None:
        self.locator = locator
        self.timeout_ms = timeout_ms
        super().__init__(f"No element matched {locator!r} within {timeout_ms} ms")


class ElementInteractionError(StepError):
    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"Failed to {action} element: {reason}")


class QueueHalted(DriverError):
    """A step failed and the error handler did not advance the queue."""

    def __init__(self, step_index: int, label: str, cause: BaseException | None) -> None:
        self.step_index = step_index
        self.label = label
        self.cause = cause
        super().__init__(f"Queue halted at step {step_index} ({label}): {cause}")
