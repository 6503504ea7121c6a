"""Dependency markers for injected objects and helpers to build objects from them.

A registration lists its dependencies as :class:`Transient` or :class:`Singleton`
markers. Each marker names a registration key. When the object is built,
every marker is resolved against the registry, in the order given. The
resolved values are passed to the constructor as positional arguments.
"""

from __future__ import annotations

import abc
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Iterable, TypeVar

from .errors import DependenciesMissingError
from .validation import ValidationError, type_name

R = TypeVar("R")


@dataclass(frozen=True)
class Dep(abc.ABC):
    """A dependency on the object registered under ``key``."""

    key: Hashable

    @property
    def name(self) -> str:
        """Best-effort human readable name of the dependency's key."""
        return type_name(self.key)

    @abc.abstractmethod
    def resolve(self, registry: Any) -> Any:
        """Look the dependency up in ``registry`` and return its value."""

    @abc.abstractmethod
    async def resolve_async(self, registry: Any) -> Any:
        """Look the dependency up in an asynchronous ``registry``."""

    def _missing(self, lifetime: str) -> DependenciesMissingError:
        return DependenciesMissingError(
            f"{lifetime} dependency {self.name} must only be constructed "
            "if it's fulfillable"
        )


@dataclass(frozen=True)
class Transient(Dep):
    """A dependency that is constructed from scratch every time it is requested."""

    def resolve(self, registry: Any) -> Any:
        """Construct a new value of the dependency from ``registry``.

        Raises :class:`DependenciesMissingError` if it cannot be constructed.
        """
        value = registry.get_transient(self.key)
        if value is None:
            raise self._missing("transient")
        return value

    async def resolve_async(self, registry: Any) -> Any:
        """Construct a new value of the dependency from an asynchronous registry."""
        value = await registry.get_transient(self.key)
        if value is None:
            raise self._missing("transient")
        return value


@dataclass(frozen=True)
class Singleton(Dep):
    """A dependency that is constructed once per registry, lazily."""

    def resolve(self, registry: Any) -> Any:
        """Return the shared instance of the dependency from ``registry``.

        Raises :class:`DependenciesMissingError` if it cannot be constructed.
        """
        value = registry.get_singleton(self.key)
        if value is None:
            raise self._missing("singleton")
        return value

    async def resolve_async(self, registry: Any) -> Any:
        """Return the shared instance of the dependency from an asynchronous registry."""
        value = await registry.get_singleton(self.key)
        if value is None:
            raise self._missing("singleton")
        return value


def _checked(deps: Iterable[Any]) -> tuple[Dep, ...]:
    deps = tuple(deps)
    for dep in deps:
        if not isinstance(dep, Dep):
            raise TypeError(
                f"dependencies must be Transient or Singleton markers, got {dep!r}"
            )
    return deps


def dependency_keys(deps: Iterable[Dep]) -> tuple[Hashable, ...]:
    """Return the registration keys of ``deps``, in order."""
    return tuple(dep.key for dep in _checked(deps))


def build(
    registry: Any,
    key: Hashable,
    deps: Iterable[Dep],
    ctor: Callable[..., R],
) -> R | None:
    """Resolve ``deps`` from ``registry`` and call ``ctor`` with their values.

    With no dependencies, ``ctor`` is called with no arguments. Otherwise the
    registry's dependency graph is validated for ``key`` first, and ``None``
    is returned if it is not valid.
    """
    deps = _checked(deps)
    if not deps:
        return ctor()
    try:
        registry.validate(key)
    except ValidationError:
        return None
    values = [dep.resolve(registry) for dep in deps]
    return ctor(*values)


async def build_async(
    registry: Any,
    key: Hashable,
    deps: Iterable[Dep],
    ctor: Callable[..., Awaitable[R] | R],
) -> R | None:
    """Asynchronous counterpart of :func:`build`.

    ``ctor`` may return an awaitable, which is awaited for the result.
    """
    deps = _checked(deps)
    if deps:
        try:
            outcome = registry.validate(key)
            if inspect.isawaitable(outcome):
                await outcome
        except ValidationError:
            return None
    values = [await dep.resolve_async(registry) for dep in deps]
    result = ctor(*values)
    if inspect.isawaitable(result):
        result = await result
    return result