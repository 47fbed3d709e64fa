import pytest
from taskchain import ChainContext


class ControllableScheduler:
    """
    A deferral primitive that holds callbacks until fired by the test.
    """

    def __init__(self):
        self.calls = []

    def __call__(self, callback, *args):
        self.calls.append((callback, args))

    def fire(self):
        """Runs every deferred callback, including ones added meanwhile."""
        while self.calls:
            callback, args = self.calls.pop(0)
            callback(*args)


class Deferred:
    """A minimal thenable that is resolved by hand."""

    def __init__(self, *values):
        self.values = values
        self.settled = False
        self._callback = None

    def then(self, callback):
        if self.settled:
            callback(*self.values)
        else:
            self._callback = callback
        return self

    def resolve(self):
        self.settled = True
        if self._callback is not None:
            self._callback(*self.values)


class Waiter:
    """
    Creates deferred thenables the way an async helper would: a call
    with arguments resolves to the list of those arguments, a call
    without any resolves to None.
    """

    def __init__(self):
        self.pending = []

    def wait_for(self, *args):
        deferred = Deferred(list(args) if args else None)
        self.pending.append(deferred)
        return deferred

    def resolve_all(self):
        while self.pending:
            self.pending.pop(0).resolve()


@pytest.fixture
def scheduler():
    return ControllableScheduler()


@pytest.fixture
def context(scheduler):
    """A ChainContext whose deferred callbacks are fired by the test."""
    return ChainContext(scheduler=scheduler)


@pytest.fixture
def waiter():
    return Waiter()


@pytest.fixture
def signal_tracker():
    """A pytest fixture that tracks calls to a blinker Signal."""

    class Tracker:
        def __init__(self):
            self.received = []

        def __call__(self, sender, **kwargs):
            self.received.append(
                {
                    "sender": sender,
                    "status": getattr(sender, "status", None),
                    **kwargs,
                }
            )

    return Tracker()
