"""Asynchronous registry holding every object that can be constructed or injected."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, ClassVar, Hashable, Iterable

from .aio_builders import (
    AsyncSingletonGetter,
    AsyncSingletonNoDeps,
    AsyncSingletonWithDeps,
    AsyncTransientBuilder,
    AsyncTransientNoDeps,
    AsyncTransientWithDeps,
)
from .dependencies import Dep, dependency_keys
from .errors import AlreadyRegisteredError
from .registration import RegistrationFunc, async_registration_funcs
from .validation import DependencyValidator, type_name


async def _run(register: RegistrationFunc, registry: AsyncRegistry) -> None:
    result = register(registry)
    if inspect.isawaitable(result):
        await result


class AsyncRegistry:
    """Registry whose constructors, lookups and registrations are awaited.

    Objects are registered under a hashable key, either as transients (built
    anew on every request) or as singletons (built once, lazily, per registry).
    """

    _global: ClassVar[AsyncRegistry | None] = None

    def __init__(self) -> None:
        self._objects: dict[Hashable, AsyncTransientBuilder | AsyncSingletonGetter] = {}
        self._validator = DependencyValidator()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @classmethod
    def empty(cls) -> AsyncRegistry:
        """Create a registry with nothing registered, not even auto-registered objects."""
        return cls()

    @classmethod
    async def autoregistered(cls) -> AsyncRegistry:
        """Create a registry holding every asynchronously auto-registered object.

        The registration functions run concurrently; the first error raised by
        any of them propagates.
        """
        registry = cls.empty()
        await asyncio.gather(
            *(_run(register, registry) for register in async_registration_funcs())
        )
        return registry

    @classmethod
    async def global_registry(cls) -> AsyncRegistry:
        """Return the process-wide registry of auto-registered objects."""
        if cls._global is None:
            registry = await cls.autoregistered()
            if cls._global is None:
                cls._global = registry
        return cls._global

    @classmethod
    async def reset_global(cls) -> None:
        """Remove everything from the global registry and run auto-registration again.

        Nothing else may use the global registry while it is reset.
        """
        registry = await cls.global_registry()
        registry._objects.clear()
        registry._validator = DependencyValidator()
        for register in async_registration_funcs():
            await _run(register, registry)

    def with_deps(self, key: Hashable, *args: Dep) -> AsyncBuilder:
        """Start registering ``key`` with the dependencies ``args``."""
        return AsyncBuilder(self, key, args)

    def validate_all(self) -> None:
        """Raise ``ValidationError`` if dependencies are missing or form a cycle."""
        self._validator.validate_all()

    def validate_all_full(self) -> None:
        """Raise ``FullValidationError`` describing missing dependencies or a cycle."""
        self._validator.validate_all_full()

    def validate(self, key: Hashable) -> None:
        """Raise ``ValidationError`` if ``key`` cannot be constructed."""
        self._validator.validate(key)

    def dotgraph(self) -> str:
        """Return the dependency graph in graphviz ``dot`` syntax."""
        return self._validator.dotgraph()

    async def transient(self, key: Hashable, ctor: Callable[[], Any]) -> None:
        """Register ``ctor`` to build a new object for ``key`` on every request.

        Raises :class:`AlreadyRegisteredError` if ``key`` is already registered.
        """
        self._register(key, AsyncTransientNoDeps(ctor), (), singleton=False)

    async def singleton(self, key: Hashable, ctor: Callable[[], Any]) -> None:
        """Register ``ctor`` to build the shared object for ``key`` once, lazily.

        Raises :class:`AlreadyRegisteredError` if ``key`` is already registered.
        """
        self._register(key, AsyncSingletonNoDeps(ctor), (), singleton=True)

    async def get_transient(self, key: Hashable) -> Any:
        """Return a newly built object for ``key``, or ``None`` if it cannot be built."""
        builder = self._objects.get(key)
        if isinstance(builder, AsyncTransientBuilder):
            return await builder.make_transient(self)
        return None

    async def get_singleton(self, key: Hashable) -> Any:
        """Return the shared object for ``key``, or ``None`` if it cannot be built."""
        getter = self._objects.get(key)
        if isinstance(getter, AsyncSingletonGetter):
            return await getter.get_singleton(self)
        return None

    def _register(
        self,
        key: Hashable,
        obj: AsyncTransientBuilder | AsyncSingletonGetter,
        deps: Iterable[Hashable],
        *,
        singleton: bool,
    ) -> None:
        if key in self._objects:
            raise AlreadyRegisteredError(key, type_name(key))
        self._objects[key] = obj
        if singleton:
            self._validator.add_singleton(key, deps)
        else:
            self._validator.add_transient(key, deps)


class AsyncBuilder:
    """Registers an object with dependencies; created by :meth:`AsyncRegistry.with_deps`."""

    def __init__(
        self, registry: AsyncRegistry, key: Hashable, deps: Iterable[Dep]
    ) -> None:
        self._registry = registry
        self._key = key
        self._deps = tuple(deps)
        self._dep_keys = dependency_keys(self._deps)

    def __repr__(self) -> str:
        return f"AsyncBuilder({type_name(self._key)})"

    async def transient(self, ctor: Callable[..., Any]) -> None:
        """Register ``ctor`` as a transient taking the resolved dependencies."""
        self._registry._register(
            self._key,
            AsyncTransientWithDeps(self._key, self._deps, ctor),
            self._dep_keys,
            singleton=False,
        )

    async def singleton(self, ctor: Callable[..., Any]) -> None:
        """Register ``ctor`` as a singleton taking the resolved dependencies."""
        self._registry._register(
            self._key,
            AsyncSingletonWithDeps(self._key, self._deps, ctor),
            self._dep_keys,
            singleton=True,
        )