"""Dependency graph validation: missing dependencies and cycle detection."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import Hashable, Iterable


def type_name(key: Hashable) -> str:
    """Return a human readable, best-effort name for a registration key."""
    if isinstance(key, type):
        if key.__module__ == "builtins":
            return key.__qualname__
        return f"{key.__module__}.{key.__qualname__}"
    if isinstance(key, str):
        return key
    return repr(key)


class ValidationErrorKind(enum.Enum):
    """What went wrong while validating the dependency graph."""

    CYCLE = "cycle"
    MISSING = "missing"


class ValidationError(Exception):
    """The dependency graph has a cycle or missing dependencies."""

    def __init__(self, kind: ValidationErrorKind) -> None:
        self.kind = kind
        message = (
            "cycle detected!"
            if kind is ValidationErrorKind.CYCLE
            else "dependencies missing!"
        )
        super().__init__(message)


@dataclass
class MissingDependencies:
    """All missing dependencies ``deps`` of the registered key ``ty``.

    ``ty`` and every entry of ``deps`` are ``(key, name)`` pairs.
    """

    ty: tuple[Hashable, str]
    deps: list[tuple[Hashable, str]] = field(default_factory=list)


class FullValidationError(Exception):
    """Detailed validation error naming the cycle node or the missing dependencies."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        *,
        node: str | None = None,
        missing: Iterable[MissingDependencies] = (),
    ) -> None:
        self.kind = kind
        self.node = node
        self.missing = list(missing)
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is ValidationErrorKind.CYCLE:
            if self.node is None:
                return "cycle detected!"
            return f"cycle detected at {self.node}"
        lines = ["dependencies missing:\n"]
        for entry in self.missing:
            key, name = entry.ty
            lines.append(f"dependencies missing for {name} ({key!r}):\n")
            for dep_key, dep_name in entry.deps:
                lines.append(f" - {dep_name} ({dep_key!r})\n")
            lines.append("\n\n")
        return "".join(lines)


@dataclass
class _Context:
    """Graph built by visiting every registration."""

    names: list[str] = field(default_factory=list)
    edges: list[tuple[int, int]] = field(default_factory=list)
    missing: dict[Hashable, MissingDependencies] = field(default_factory=dict)
    visited: dict[Hashable, int] = field(default_factory=dict)
    checked: bool = False
    cycle_at: int | None = None

    def reset(self) -> None:
        self.names.clear()
        self.edges.clear()
        self.missing.clear()
        self.visited.clear()
        self.checked = False
        self.cycle_at = None

    def add_node(self, name: str) -> int:
        self.names.append(name)
        return len(self.names) - 1


def _find_cycle(node_count: int, edges: list[tuple[int, int]]) -> int | None:
    """Return the index of a node on a cycle, or ``None`` if the graph is acyclic."""
    adjacency: list[list[int]] = [[] for _ in range(node_count)]
    for source, target in edges:
        adjacency[source].append(target)

    unseen, active, done = 0, 1, 2
    state = [unseen] * node_count
    for root in reversed(range(node_count)):
        if state[root] != unseen:
            continue
        state[root] = active
        stack = [(root, iter(adjacency[root]))]
        while stack:
            node, successors = stack[-1]
            for nxt in successors:
                if state[nxt] == active:
                    return nxt
                if state[nxt] == unseen:
                    state[nxt] = active
                    stack.append((nxt, iter(adjacency[nxt])))
                    break
            else:
                state[node] = done
                stack.pop()
    return None


def _dot_escape(text: str) -> str:
    out = []
    for char in text:
        if char in ('"', "\\"):
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\l")
        else:
            out.append(char)
    return "".join(out)


class DependencyValidator:
    """Checks that every registration's dependencies exist and form no cycle."""

    def __init__(self) -> None:
        self._registrations: dict[Hashable, tuple[Hashable, ...]] = {}
        self._context = _Context()
        self._lock = threading.RLock()

    def add_transient(self, key: Hashable, deps: Iterable[Hashable]) -> None:
        """Record a transient registration of ``key`` depending on ``deps``."""
        with self._lock:
            self._registrations[key] = tuple(deps)
            self._context.reset()

    def add_singleton(self, key: Hashable, deps: Iterable[Hashable]) -> None:
        """Record a singleton registration of ``key`` depending on ``deps``."""
        self.add_transient(key, deps)

    def validate_all(self) -> None:
        """Raise :class:`ValidationError` if any dependency is missing or cyclic."""
        with self._lock:
            if not self._check_context(self._context):
                self._calculate(self._context)
                self._check_context(self._context)

    def validate_all_full(self) -> None:
        """Raise :class:`FullValidationError` describing what is missing or cyclic."""
        context = _Context()
        with self._lock:
            self._calculate(context)

        if context.missing:
            raise FullValidationError(
                ValidationErrorKind.MISSING, missing=context.missing.values()
            )
        if context.cycle_at is not None:
            raise FullValidationError(
                ValidationErrorKind.CYCLE, node=context.names[context.cycle_at]
            )

    def validate(self, key: Hashable) -> None:
        """Validate that ``key`` is constructible; checks the whole graph."""
        del key
        self.validate_all()

    def dotgraph(self) -> str:
        """Return the dependency graph in graphviz ``dot`` syntax."""
        with self._lock:
            self.validate_all()
            context = self._context
            lines = ["digraph {\n"]
            for index, name in enumerate(context.names):
                label = _dot_escape('"' + _dot_escape(name) + '"')
                lines.append(f'    {index} [ label = "{label}" ]\n')
            for source, target in context.edges:
                lines.append(f"    {source} -> {target} [ ]\n")
            lines.append("}\n")
            return "".join(lines)

    @staticmethod
    def _check_context(context: _Context) -> bool:
        """Return ``True`` if a valid result is cached, ``False`` if none is."""
        if context.missing:
            raise ValidationError(ValidationErrorKind.MISSING)
        if context.checked:
            if context.cycle_at is not None:
                raise ValidationError(ValidationErrorKind.CYCLE)
            return True
        return False

    def _calculate(self, context: _Context) -> None:
        for key in self._registrations:
            self._visit(key, context)
        context.cycle_at = _find_cycle(len(context.names), context.edges)
        context.checked = True

    def _visit(self, key: Hashable, context: _Context) -> int:
        if key in context.visited:
            return context.visited[key]

        current = context.add_node(type_name(key))
        context.visited[key] = current

        for dep in self._registrations[key]:
            if dep in context.visited:
                context.edges.append((current, context.visited[dep]))
            elif dep in self._registrations:
                context.edges.append((current, self._visit(dep, context)))
            else:
                entry = context.missing.setdefault(
                    key, MissingDependencies(ty=(key, type_name(key)))
                )
                entry.deps.append((dep, type_name(dep)))
        return current