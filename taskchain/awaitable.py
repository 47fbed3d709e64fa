"""
Structural detection of awaitable results.

Anything exposing a callable `then` member is treated as a thenable,
which includes other Chain instances. Objects that look like futures
(asyncio or concurrent.futures) are awaited through
`add_done_callback()`.
"""

import asyncio
import logging
import types
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


def _is_object(value: Any) -> bool:
    # Classes and functions are never awaited, even with a `then` member.
    return value is not None and not isinstance(
        value, (type, types.FunctionType, types.MethodType)
    )


def _has_then(value: Any) -> bool:
    if not _is_object(value):
        return False
    return callable(getattr(value, "then", None))


def _is_future(value: Any) -> bool:
    if not _is_object(value):
        return False
    return callable(getattr(value, "add_done_callback", None)) and callable(
        getattr(value, "result", None)
    )


def is_thenable(value: Any) -> bool:
    """Checks whether the value can be awaited by a chain."""
    return _has_then(value) or _is_future(value)


def register_continuation(
    value: Any,
    callback: Callable[..., Any],
    on_error: Optional[Callable[[BaseException], Any]] = None,
) -> None:
    """
    Arranges for `callback` to be called once `value` settles.

    Thenables receive the callback as their single continuation and call
    it with whatever they resolve to. Futures call it with their result.
    A future that failed or was cancelled passes its exception to
    `on_error` instead, or raises it when no `on_error` is given.
    """
    if _has_then(value):
        value.then(callback)
        return

    def _done(future):
        try:
            result = future.result()
        except (Exception, asyncio.CancelledError) as error:
            logger.debug(f"Awaited future {future!r} failed: {error!r}")
            if on_error is None:
                raise
            on_error(error)
            return
        callback(result)

    value.add_done_callback(_done)
