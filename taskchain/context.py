"""
ChainContext module for error escalation and deferred execution.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional
from blinker import Signal
from . import config
from .util.idle import idle_add

if TYPE_CHECKING:
    from .chain import Chain


logger = logging.getLogger(__name__)


ErrorHandler = Callable[[BaseException], Any]
Scheduler = Callable[..., Any]


class ChainContext:
    """
    Shared collaborators of a group of chains.

    A context owns the deferral primitive used to re-check rejections on
    the next turn, and the error sink that receives rejections nobody
    handled. Chains created without an explicit context share
    `default_context`.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[ErrorHandler] = None,
    ):
        self.scheduler: Optional[Scheduler] = scheduler
        self.on_error: Optional[ErrorHandler] = on_error
        self.error_escalated = Signal()

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """
        Installs the error sink for unhandled rejections. Passing None
        restores the default behavior of raising the error.
        """
        self.on_error = handler

    def defer(self, callback: Callable[..., Any], *args: Any) -> bool:
        """
        Runs the callback after the current execution turn.

        An injected scheduler always takes the callback. Without one, the
        callback goes to the running asyncio loop; False is returned when
        there is none and nothing was scheduled.
        """
        if self.scheduler is not None:
            self.scheduler(callback, *args)
            return True
        return idle_add(callback, *args)

    def escalate(
        self, error: BaseException, chain: Optional[Chain] = None
    ) -> None:
        """
        Reports a rejection that had no handler by the time the deferred
        check ran. The installed error sink receives it, otherwise the
        error is raised again from here.
        """
        if config.LOG_UNHANDLED:
            logger.error(
                f"Unhandled rejection in chain {chain!r}: {error!r}",
                exc_info=(type(error), error, error.__traceback__),
            )
        self.error_escalated.send(self, error=error, chain=chain)

        handler = self.on_error
        if callable(handler):
            handler(error)
            return
        raise error


default_context = ChainContext()


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Installs the error sink of the shared default context."""
    default_context.set_error_handler(handler)
