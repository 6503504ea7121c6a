"""Errors raised while resolving and registering injectable objects."""

from __future__ import annotations

from typing import Hashable


class ResolveError(Exception):
    """A lazily resolved object could not be resolved."""

    default_message = "couldn't resolve object"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class LockAcquireError(ResolveError):
    """The lock guarding the inner value could not be acquired."""

    default_message = "lock couldn't be acquired"


class DependenciesMissingError(ResolveError):
    """Some of the required dependencies are missing."""

    default_message = "couldn't resolve dependencies"


class AlreadyRegisteredError(Exception):
    """A key was registered a second time in the same registry."""

    def __init__(self, key: Hashable, name: str | None = None) -> None:
        self.key = key
        self.name = name if name is not None else str(key)
        super().__init__(f"Type '{self.name}' ({key!r}) is already registered")