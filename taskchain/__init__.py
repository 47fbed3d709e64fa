"""
Sequential task chaining with promise-style semantics.
"""

from .chain import Chain, ChainStatus
from .context import ChainContext, default_context, set_error_handler
from .awaitable import is_thenable
from .task import Awaitable, Invocable, StaticValue, normalize

__version__ = "0.1.0"

__all__ = [
    "Chain",
    "ChainStatus",
    "ChainContext",
    "default_context",
    "set_error_handler",
    "is_thenable",
    "normalize",
    "StaticValue",
    "Invocable",
    "Awaitable",
    "__version__",
]
