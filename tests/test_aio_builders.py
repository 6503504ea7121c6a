import asyncio

import pytest

from injectry.aio_builders import (
    AsyncSingletonGetter,
    AsyncSingletonNoDeps,
    AsyncSingletonWithDeps,
    AsyncTransientBuilder,
    AsyncTransientNoDeps,
    AsyncTransientWithDeps,
)
from injectry.aio_registry import AsyncRegistry
from injectry.dependencies import Singleton, Transient


class Widget:
    def __init__(self, *parts):
        self.parts = parts


def test_abstract_bases_cannot_be_instantiated():
    with pytest.raises(TypeError):
        AsyncTransientBuilder()
    with pytest.raises(TypeError):
        AsyncSingletonGetter()


@pytest.mark.asyncio
async def test_transient_no_deps_builds_new_objects_with_async_ctor():
    async def make():
        return Widget()

    builder = AsyncTransientNoDeps(make)
    first = await builder.make_transient(None)
    second = await builder.make_transient(None)
    assert isinstance(first, Widget)
    assert first is not second


@pytest.mark.asyncio
async def test_transient_no_deps_accepts_plain_ctor():
    builder = AsyncTransientNoDeps(lambda: 42)
    assert await builder.make_transient(None) == 42


@pytest.mark.asyncio
async def test_transient_with_deps_passes_resolved_values_in_order():
    registry = AsyncRegistry.empty()
    await registry.transient(int, lambda: 7)
    await registry.singleton(str, lambda: "seven")

    async def make(number, text):
        return Widget(number, text)

    builder = AsyncTransientWithDeps(Widget, [Transient(int), Singleton(str)], make)
    await registry.with_deps(Widget, Transient(int), Singleton(str)).transient(make)
    widget = await builder.make_transient(registry)
    assert widget.parts == (7, "seven")


@pytest.mark.asyncio
async def test_transient_with_deps_returns_none_when_dependency_missing():
    registry = AsyncRegistry.empty()
    await registry.with_deps(Widget, Transient(int)).transient(Widget)
    builder = AsyncTransientWithDeps(Widget, [Transient(int)], Widget)
    assert await builder.make_transient(registry) is None


@pytest.mark.asyncio
async def test_singleton_no_deps_calls_ctor_once():
    calls = []

    async def make():
        calls.append(1)
        return Widget()

    getter = AsyncSingletonNoDeps(make)
    first = await getter.get_singleton(None)
    second = await getter.get_singleton(None)
    assert first is second
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_singleton_no_deps_concurrent_requests_share_one_object():
    calls = []

    async def make():
        calls.append(1)
        await asyncio.sleep(0)
        return Widget()

    getter = AsyncSingletonNoDeps(make)
    results = await asyncio.gather(*(getter.get_singleton(None) for _ in range(5)))
    assert len(calls) == 1
    assert all(result is results[0] for result in results)


@pytest.mark.asyncio
async def test_singleton_no_deps_retries_after_failing_ctor():
    attempts = []

    def make():
        attempts.append(1)
        if len(attempts) == 1:
            raise ValueError("boom")
        return Widget()

    getter = AsyncSingletonNoDeps(make)
    with pytest.raises(ValueError):
        await getter.get_singleton(None)
    widget = await getter.get_singleton(None)
    assert isinstance(widget, Widget)
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_singleton_with_deps_none_until_dependency_registered():
    registry = AsyncRegistry.empty()
    await registry.with_deps(Widget, Transient(int)).singleton(Widget)
    getter = AsyncSingletonWithDeps(Widget, [Transient(int)], Widget)

    assert await getter.get_singleton(registry) is None

    await registry.transient(int, lambda: 3)
    first = await getter.get_singleton(registry)
    second = await getter.get_singleton(registry)
    assert first is second
    assert first.parts == (3,)