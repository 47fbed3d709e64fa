"""
Queue item normalization.

A chain accepts plain values, callables, `[fn, context, *args]` records
and thenables. `normalize()` turns each raw item into one of the task
variants below so the execution loop does not have to inspect types.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, Union
from .awaitable import is_thenable


@dataclass(frozen=True)
class StaticValue:
    """A value passed through unchanged as the step result."""

    value: Any
    bound_args = ()
    consumes_args = False

    def run(self, params: List[Any]) -> Any:
        return self.value


@dataclass(frozen=True)
class Awaitable:
    """A thenable queued directly; the chain waits for it to settle."""

    ref: Any
    bound_args = ()
    consumes_args = False

    def run(self, params: List[Any]) -> Any:
        return self.ref


@dataclass(frozen=True)
class Invocable:
    """
    A callable with an optional receiver and pre-bound arguments.

    The receiver, when not None, is passed as the leading positional
    argument, followed by the bound arguments and then the values
    forwarded from the previous step.
    """

    fn: Callable[..., Any]
    context: Any = None
    bound_args: Tuple[Any, ...] = field(default_factory=tuple)
    consumes_args = True

    def run(self, params: List[Any]) -> Any:
        if self.context is None:
            return self.fn(*params)
        return self.fn(self.context, *params)


Task = Union[StaticValue, Invocable, Awaitable]


def _invocable_shape(item: Any) -> Optional[Invocable]:
    if isinstance(item, (list, tuple)) and item and callable(item[0]):
        context = item[1] if len(item) > 1 else None
        return Invocable(item[0], context, tuple(item[2:]))
    return None


def normalize(item: Any) -> Task:
    """Classifies a raw queue item."""
    if isinstance(item, (StaticValue, Invocable, Awaitable)):
        return item
    invocable = _invocable_shape(item)
    if invocable is not None:
        return invocable
    if callable(item):
        return Invocable(item)
    if is_thenable(item):
        return Awaitable(item)
    return StaticValue(item)
