"""
Performance timing utilities for debugging.

Measures how long remote calls take when the WA_DEBUG environment variable is set.
"""

import functools
import logging
import time
from typing import Callable, ParamSpec, TypeVar

from .debug_log import is_debug_enabled

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def timer(func: Callable[P, R]) -> Callable[P, R]:
    """
    Decorator that logs execution time when WA_DEBUG=1.

    The flag is checked per call because the CLI sets it after import.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if not is_debug_enabled():
            return func(*args, **kwargs)

        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"[WA_DEBUG] {func.__qualname__}: {elapsed_ms:.2f}ms")

    return wrapper
