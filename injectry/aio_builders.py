"""Asynchronous builders for transient objects and lazily built singletons.

Constructors may be coroutine functions or plain callables; any awaitable
they return is awaited for the object.
"""

from __future__ import annotations

import abc
import asyncio
import inspect
from typing import Any, Callable, Hashable, Iterable

from .dependencies import Dep, build_async


async def _call(ctor: Callable[..., Any], *args: Any) -> Any:
    result = ctor(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class AsyncTransientBuilder(abc.ABC):
    """Builds a new object with transient lifetime on every call."""

    @abc.abstractmethod
    async def make_transient(self, registry: Any) -> Any:
        """Construct a new object, resolving dependencies from ``registry``.

        Returns ``None`` if the dependencies could not be fulfilled.
        """


class AsyncSingletonGetter(abc.ABC):
    """Builds an object with singleton lifetime once and returns it afterwards."""

    @abc.abstractmethod
    async def get_singleton(self, registry: Any) -> Any:
        """Return the shared object, constructing it on first use.

        Returns ``None`` if the dependencies could not be fulfilled.
        """


class AsyncTransientNoDeps(AsyncTransientBuilder):
    """Transient builder whose constructor takes no dependencies."""

    def __init__(self, ctor: Callable[[], Any]) -> None:
        self._ctor = ctor

    async def make_transient(self, registry: Any) -> Any:
        """Call the constructor and return the new object."""
        del registry
        return await _call(self._ctor)


class AsyncTransientWithDeps(AsyncTransientBuilder):
    """Transient builder whose constructor receives resolved dependencies."""

    def __init__(
        self, key: Hashable, deps: Iterable[Dep], ctor: Callable[..., Any]
    ) -> None:
        self._key = key
        self._deps = tuple(deps)
        self._ctor = ctor

    async def make_transient(self, registry: Any) -> Any:
        """Resolve the dependencies from ``registry`` and construct a new object."""
        return await build_async(registry, self._key, self._deps, self._ctor)


class _OnceState:
    """Shared state of a singleton that is built at most once."""

    def __init__(self, ctor: Callable[..., Any]) -> None:
        self.ctor: Callable[..., Any] | None = ctor
        self.ready = False
        self.value: Any = None
        self._lock: asyncio.Lock | None = None

    @property
    def lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def take(self) -> Callable[..., Any]:
        ctor, self.ctor = self.ctor, None
        if ctor is None:
            raise RuntimeError("singleton constructor is already running")
        return ctor

    def store(self, value: Any) -> None:
        self.value = value
        self.ready = True


class AsyncSingletonNoDeps(AsyncSingletonGetter):
    """Singleton getter whose constructor takes no dependencies.

    The constructor is called at most once, even for concurrent requests.
    """

    def __init__(self, ctor: Callable[[], Any]) -> None:
        self._state = _OnceState(ctor)

    async def get_singleton(self, registry: Any) -> Any:
        """Return the shared object, constructing it on the first call."""
        del registry
        state = self._state
        if state.ready:
            return state.value
        async with state.lock:
            if not state.ready:
                ctor = state.take()
                try:
                    value = await _call(ctor)
                except BaseException:
                    state.ctor = ctor
                    raise
                state.store(value)
        return state.value


class AsyncSingletonWithDeps(AsyncSingletonGetter):
    """Singleton getter whose constructor receives resolved dependencies.

    The constructor is called at most once, and only when every dependency
    can be fulfilled.
    """

    def __init__(
        self, key: Hashable, deps: Iterable[Dep], ctor: Callable[..., Any]
    ) -> None:
        self._key = key
        self._deps = tuple(deps)
        self._state = _OnceState(ctor)

    async def get_singleton(self, registry: Any) -> Any:
        """Return the shared object, building it from ``registry`` on first use.

        Returns ``None`` if the dependencies cannot be fulfilled; a later call
        tries again.
        """
        state = self._state
        if state.ready:
            return state.value
        async with state.lock:
            if state.ready:
                return state.value
            ctor = state.take()
            made = []

            def _once(*values: Any) -> Any:
                made.append(True)
                return ctor(*values)

            try:
                obj = await build_async(registry, self._key, self._deps, _once)
            except BaseException:
                state.ctor = ctor
                raise
            if not made:
                state.ctor = ctor
                return None
            state.store(obj)
        return state.value