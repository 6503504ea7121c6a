"""Auto-registration of objects into the global registry.

Functions submitted with :func:`autoregister` are run against every registry
built by ``Registry.autoregistered``, including the global registry.
Functions submitted with :func:`autoregister_async` are awaited by the
asynchronous registry in the same way.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

F = TypeVar("F")


@dataclass(frozen=True, repr=False)
class RegistrationFunc:
    """A function that registers one or more objects into the registry it is given.

    The function must have no side effects besides the registration; it may
    be called several times and from any thread.
    """

    register: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not callable(self.register):
            raise TypeError(
                f"registration function must be callable, got {self.register!r}"
            )

    def __call__(self, registry: Any) -> Any:
        return self.register(registry)

    def __repr__(self) -> str:
        name = getattr(self.register, "__qualname__", None) or repr(self.register)
        return f"RegistrationFunc({name})"


_lock = threading.Lock()
_sync_funcs: list[RegistrationFunc] = []
_async_funcs: list[RegistrationFunc] = []


def _submit(target: list[RegistrationFunc], func: F) -> F:
    entry = func if isinstance(func, RegistrationFunc) else RegistrationFunc(func)
    with _lock:
        target.append(entry)
    return func


def autoregister(func: F) -> F:
    """Submit ``func`` for auto-registration; returns ``func`` unchanged.

    ``func`` is either a :class:`RegistrationFunc` or a callable taking the
    registry, so this also works as a decorator.
    """
    return _submit(_sync_funcs, func)


def autoregister_async(func: F) -> F:
    """Submit an asynchronous ``func`` for auto-registration; returns ``func``."""
    return _submit(_async_funcs, func)


def registration_funcs() -> tuple[RegistrationFunc, ...]:
    """Return every submitted synchronous registration function, in order."""
    with _lock:
        return tuple(_sync_funcs)


def async_registration_funcs() -> tuple[RegistrationFunc, ...]:
    """Return every submitted asynchronous registration function, in order."""
    with _lock:
        return tuple(_async_funcs)