"""
Chain module: an ordered task executor with promise-style chaining.
"""

from __future__ import annotations
import logging
import threading
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, List, Optional
from blinker import Signal
from .awaitable import is_thenable, register_continuation
from .context import ChainContext, default_context
from .task import normalize


logger = logging.getLogger(__name__)


class ChainStatus(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"
    CANCELED = "canceled"


# Distinguishes "no argument" from None, which is a valid static value.
_UNSET: Any = object()


class Chain:
    """
    Runs queued items one at a time, forwarding each result to the next.

    Items may be plain values, callables, `[fn, context, *args]` records
    or thenables. The chain waits for every thenable to settle before
    moving on. New items can be queued at any time, and a chain that has
    drained its queue resumes when more items are added.
    """

    def __init__(self, *tasks: Any, context: Optional[ChainContext] = None):
        self._queue: Deque[Any] = deque(tasks)
        self._status = ChainStatus.PENDING
        self._reason: Optional[BaseException] = None
        self._on_rejected: Optional[Callable[[BaseException], Any]] = None
        self._handled = False
        self._check_on_collect = False
        self._lock = threading.Lock()
        self._context = context or default_context
        self.status_changed = Signal()

        if self._queue:
            self._process()

    def __repr__(self) -> str:
        return (
            f"<Chain {self._status.value} "
            f"queued={len(self._queue)} at {id(self):#x}>"
        )

    @property
    def status(self) -> ChainStatus:
        return self._status

    @property
    def reason(self) -> Optional[BaseException]:
        return self._reason

    @property
    def context(self) -> ChainContext:
        return self._context

    def get_status(self) -> ChainStatus:
        """Get the current lifecycle status of the chain."""
        return self._status

    def is_cancelled(self) -> bool:
        """Checks if the chain has been canceled."""
        return self._status is ChainStatus.CANCELED

    def pending_count(self) -> int:
        """Number of items still waiting in the queue."""
        return len(self._queue)

    def then(self, on_fulfilled: Any = _UNSET, on_rejected=None) -> Chain:
        """
        Queues `on_fulfilled`, which may be any task item.

        A callable `on_rejected` replaces the rejection handler. If the
        chain is already rejected, the handler is called right away with
        the reason. If the chain is fulfilled, a callable `on_fulfilled`
        is called right away without arguments instead of being queued.

        Queued items only run once the loop is driven, either by
        `process()` or by `add()` on a fulfilled chain.
        """
        if callable(on_rejected):
            self._on_rejected = on_rejected

        if (
            self._status is ChainStatus.REJECTED
            and self._on_rejected is not None
        ):
            self._handle_rejection()
        elif self._status is ChainStatus.FULFILLED and callable(on_fulfilled):
            on_fulfilled()
        elif on_fulfilled is not _UNSET:
            self._queue.append(on_fulfilled)

        return self

    def catch(self, on_rejected=None) -> Chain:
        """
        Sets the rejection handler. It is called immediately if the chain
        is already rejected.
        """
        if callable(on_rejected):
            self._on_rejected = on_rejected

        if (
            self._status is ChainStatus.REJECTED
            and self._on_rejected is not None
        ):
            self._handle_rejection()

        return self

    def add(self, items: Any = None) -> Chain:
        """
        Appends a list or tuple of items. Anything else is ignored.

        A fulfilled chain goes back to pending and starts processing the
        new items immediately.
        """
        if not isinstance(items, (list, tuple)):
            logger.debug(
                f"Chain {self!r}: Ignoring add() of non-sequence "
                f"{type(items).__name__}."
            )
            return self

        self._queue.extend(items)
        logger.debug(f"Chain {self!r}: Added {len(items)} items.")

        if self._status is ChainStatus.FULFILLED:
            self._set_status(ChainStatus.PENDING)
            self.process()

        return self

    def process(self, *args: Any) -> Chain:
        """
        Drives the queue, passing `args` to the next queued item.
        """
        self._process(*args)
        return self

    def cancel(self) -> Chain:
        """
        Stops the chain for good. Items still queued never run, and an
        in-flight thenable that settles later is ignored.
        """
        logger.debug(f"Chain {self!r}: Cancel method called.")
        self._set_status(ChainStatus.CANCELED)
        return self

    def _set_status(self, status: ChainStatus) -> None:
        if self._status is status:
            return
        self._status = status
        self.status_changed.send(self)

    def _check_status(self) -> bool:
        if self._status is not ChainStatus.PENDING:
            return False

        if not self._queue:
            self._set_status(ChainStatus.FULFILLED)
            return False

        return True

    def _process(self, *args: Any) -> None:
        forwarded: List[Any] = list(args)

        while self._check_status():
            task = normalize(self._queue.popleft())
            params = list(task.bound_args) + forwarded
            logger.debug(f"Chain {self!r}: Running {task!r}.")

            try:
                result = task.run(params)
            except Exception as error:
                self._reject(error)
                return

            if task.consumes_args:
                params = []

            if is_thenable(result):
                logger.debug(
                    f"Chain {self!r}: Waiting for {result!r} to settle."
                )
                register_continuation(
                    result, self._process, on_error=self._on_await_error
                )
                return

            params.append(result)
            forwarded = params

    def _on_await_error(self, error: BaseException) -> None:
        if self._status is ChainStatus.PENDING:
            self._reject(error)

    def _reject(self, error: BaseException) -> None:
        self._reason = error
        with self._lock:
            self._handled = False
        self._set_status(ChainStatus.REJECTED)

        if self._on_rejected is not None:
            self._handle_rejection()
            return

        if self._context.defer(self._check_unhandled, error):
            logger.warning(
                f"Chain {self!r}: Step failed with {error!r} and no "
                f"rejection handler is set, checking again on the next turn."
            )
            return

        # No event loop is running, so there is no next turn to wait for.
        # The rejection is reported when the chain is collected instead.
        logger.warning(
            f"Chain {self!r}: Step failed with {error!r} and no rejection "
            f"handler is set, checking again when the chain is collected."
        )
        self._check_on_collect = True

    def _handle_rejection(self) -> None:
        with self._lock:
            self._handled = True
        self._on_rejected(self._reason)

    def _claim_unhandled(self) -> bool:
        with self._lock:
            if self._handled:
                return False
            self._handled = True
            return True

    def _check_unhandled(self, error: BaseException) -> None:
        # Handlers attached after the failure already ran from
        # then()/catch() and marked the rejection handled.
        if not self._claim_unhandled():
            return
        self._context.escalate(error, chain=self)

    def __del__(self):
        if not getattr(self, "_check_on_collect", False):
            return
        self._check_on_collect = False
        self._check_unhandled(self._reason)
