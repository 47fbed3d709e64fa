"""
Deferral primitive used to run a callback after the current execution
turn.
"""

import asyncio
import logging
from typing import Any, Callable


logger = logging.getLogger(__name__)


def _running_loop():
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def idle_add(callback: Callable[..., Any], *args, **kwargs) -> bool:
    """
    Queues `callback(*args, **kwargs)` on the asyncio event loop running
    in the calling thread, so it runs once the current turn has finished.

    Returns False without scheduling anything when no loop is running:
    plain synchronous code has no next turn to wait for, and callers
    pick their own fallback.
    """
    loop = _running_loop()
    if loop is None:
        return False

    if kwargs:
        loop.call_soon(lambda: callback(*args, **kwargs))
    else:
        loop.call_soon(callback, *args)
    return True
