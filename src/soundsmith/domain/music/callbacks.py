"""Consume-once lifecycle callbacks attached to queued tracks."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Generic, ParamSpec

P = ParamSpec("P")


class CallbackState(Enum):
    """Whether a one-shot callback may still fire."""

    PENDING = "pending"
    FIRED = "fired"


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


class OnceCallback(Generic[P]):
    """Wrap a callable so that it runs at most once.

    The state flips to ``FIRED`` before the wrapped function is invoked, so a
    re-entrant call made from inside the function (or a duplicate status event
    from the audio sink) is absorbed silently. ``clear()`` retires the callback
    without invoking it.
    """

    __slots__ = ("_func", "_state")

    def __init__(self, func: Callable[P, object] | None = None) -> None:
        self._func: Callable[P, object] = func or _noop
        self._state = CallbackState.PENDING

    @property
    def state(self) -> CallbackState:
        return self._state

    @property
    def fired(self) -> bool:
        return self._state is CallbackState.FIRED

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> None:
        if self._state is CallbackState.FIRED:
            return
        self._state = CallbackState.FIRED
        self._func(*args, **kwargs)

    def clear(self) -> None:
        """Mark the callback as spent without running it."""
        self._state = CallbackState.FIRED

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", repr(self._func))
        return f"OnceCallback({name}, state={self._state.value})"
