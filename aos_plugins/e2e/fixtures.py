"""Helpers shared by plugin end-to-end tests."""

import logging
import secrets
import time
from typing import Any, Callable, Optional, TypeVar

from aos_plugins.e2e.client import AgentOS, AgentOSError, get_agentos

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Test data prefix for easy identification and cleanup
TEST_PREFIX = "[TEST]"


def make_test_id(prefix: str = "") -> str:
    """Unique identifier: [prefix_]<millis>_<random>."""
    stamp = f"{int(time.time() * 1000)}_{secrets.token_hex(3)}"
    return f"{prefix}_{stamp}" if prefix else stamp


def is_test_data(value: str) -> bool:
    return value.startswith(TEST_PREFIX)


def make_test_content(description: str = "test item") -> str:
    """Title for data created by tests, e.g. "[TEST] task 1712345678901_a1b2c3"."""
    return f"{TEST_PREFIX} {description} {make_test_id()}"


def aos() -> AgentOS:
    """The shared AgentOS session."""
    return get_agentos()


def _default_filter(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return is_test_data(item.get("title") or item.get("name") or "")


def cleanup_test_data(app: str, filter_fn: Callable[[Any], bool] = _default_filter) -> int:
    """Delete test records from an app. Returns how many were deleted.

    Failures are logged, never raised, so cleanup cannot fail a test run.
    """
    agentos = get_agentos()
    try:
        items = agentos.call(app, {"action": "list", "params": {"limit": 1000}}) or []
    except AgentOSError as e:
        logger.warning(f"Failed to cleanup {app}: {e}")
        return 0

    deleted = 0
    for item in filter(filter_fn, items):
        try:
            agentos.call(app, {"action": "delete", "params": {"id": item["id"]}, "execute": True})
            deleted += 1
        except AgentOSError as e:
            logger.warning(f"Failed to delete {app} item {item['id']}: {e}")
    return deleted


def sleep(seconds: float) -> None:
    time.sleep(seconds)


def wait_for(condition: Callable[[], bool], timeout: float = 10.0, interval: float = 0.1,
             message: str = "Condition not met") -> None:
    """Poll until condition() is true.

    Raises:
        TimeoutError: If the condition is still false after timeout seconds
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return
        sleep(interval)
    raise TimeoutError(f"{message} (timeout after {timeout}s)")


def retry(fn: Callable[[], T], retries: int = 3, delay: float = 1.0, backoff: float = 2.0) -> T:
    """Call fn, retrying on any exception with exponential backoff."""
    last_error: Optional[Exception] = None
    current_delay = delay
    for attempt in range(retries + 1):
        try:
            return fn()
        except Exception as e:
            last_error = e
            if attempt < retries:
                logger.debug(f"Attempt {attempt + 1} failed ({e}), retrying in {current_delay}s")
                sleep(current_delay)
                current_delay *= backoff
    raise last_error
