import pytest

from injectry.registration import (
    RegistrationFunc,
    async_registration_funcs,
    autoregister,
    autoregister_async,
    registration_funcs,
)


class _Recorder:
    def __init__(self):
        self.calls = []

    def transient(self, key, ctor):
        self.calls.append((key, ctor()))


class _AsyncRecorder:
    def __init__(self):
        self.calls = []

    async def transient(self, key, ctor):
        self.calls.append((key, await ctor()))


@autoregister
def _register_sync(registry):
    registry.transient("registration-test-key", lambda: "registered")


async def _make_async_value():
    return "async-registered"


@autoregister_async
async def _register_async(registry):
    await registry.transient("registration-test-async-key", _make_async_value)


def test_registration_func_calls_wrapped_function():
    recorder = _Recorder()
    func = RegistrationFunc(lambda registry: registry.transient("k", lambda: 7))
    func(recorder)
    assert recorder.calls == [("k", 7)]


def test_registration_func_rejects_non_callable():
    with pytest.raises(TypeError):
        RegistrationFunc(42)


def test_autoregister_used_as_decorator_keeps_function():
    def _local_register(registry):
        registry.transient("decorator-test-key", lambda: "decorated")

    decorated = autoregister(_local_register)
    recorder = _Recorder()
    decorated(recorder)
    assert recorder.calls == [("decorator-test-key", "decorated")]
    assert registration_funcs()[-1].register is _local_register


def test_autoregistered_function_is_listed_once():
    entries = [f for f in registration_funcs() if f.register is _register_sync]
    assert len(entries) == 1


def test_sync_and_async_lists_are_separate():
    assert all(f.register is not _register_async for f in registration_funcs())
    assert any(f.register is _register_async for f in async_registration_funcs())


def test_autoregister_accepts_registration_func():
    def _noop(registry):
        return registry

    wrapped = RegistrationFunc(_noop)
    before = len(registration_funcs())
    result = autoregister(wrapped)
    after = registration_funcs()
    assert result is wrapped
    assert len(after) == before + 1
    assert after[-1] == wrapped


def test_autoregister_rejects_non_callable():
    with pytest.raises(TypeError):
        autoregister("not callable")


@pytest.mark.asyncio
async def test_async_registration_func_is_awaitable():
    recorder = _AsyncRecorder()
    entry = next(f for f in async_registration_funcs() if f.register is _register_async)
    await entry(recorder)
    assert recorder.calls == [("registration-test-async-key", "async-registered")]