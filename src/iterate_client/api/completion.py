"""
One-shot completion callbacks.
"""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

CompletionCallback = Callable[[Optional[T], Optional[Exception]], None]


class Completion(Generic[T]):
    """
    Wraps a ``(result, error)`` callback so it runs at most once.

    Later invocations are dropped and logged.
    """

    def __init__(self, callback: CompletionCallback):
        self._callback = callback
        self._fired = False
        self._lock = threading.Lock()

    @classmethod
    def wrap(cls, callback) -> "Completion":
        """Return ``callback`` as a Completion, reusing it if it already is one."""
        if isinstance(callback, cls):
            return callback
        return cls(callback)

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, result: Optional[T], error: Optional[Exception]) -> bool:
        with self._lock:
            if self._fired:
                logger.warning(f"Completion already delivered, dropping {error or result!r}")
                return False
            self._fired = True

        self._callback(result, error)
        return True
