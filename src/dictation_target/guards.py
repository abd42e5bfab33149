"""Fail-closed wrapper shared by every public engine entry point."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def fail_closed(default: Any = None, *, factory: Optional[Callable[[], Any]] = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Run the wrapped call and map any exception to its documented empty result.

    ``factory`` builds a fresh empty value per failure for mutable results such as lists.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001 - host traversal errors never propagate
                logger.warning("%s failed; returning empty result: %s", func.__qualname__, exc)
                return factory() if factory is not None else default

        return wrapper

    return decorator


__all__ = ["fail_closed"]
