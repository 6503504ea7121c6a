import pytest

from injectry.errors import (
    AlreadyRegisteredError,
    DependenciesMissingError,
    LockAcquireError,
    ResolveError,
)


def test_lock_acquire_message():
    assert str(LockAcquireError()) == "lock couldn't be acquired"


def test_dependencies_missing_message():
    assert str(DependenciesMissingError()) == "couldn't resolve dependencies"


@pytest.mark.parametrize(
    ("cls", "message"),
    [
        (LockAcquireError, "lock couldn't be acquired"),
        (DependenciesMissingError, "couldn't resolve dependencies"),
    ],
)
def test_resolve_errors_share_base(cls, message):
    with pytest.raises(ResolveError) as info:
        raise cls()
    assert type(info.value) is cls
    assert str(info.value) == message


def test_custom_message_overrides_default():
    assert str(DependenciesMissingError("gone")) == "gone"


def test_already_registered_keeps_key_and_name():
    err = AlreadyRegisteredError(int, "int")
    assert err.key is int
    assert err.name == "int"
    assert "Type 'int'" in str(err)
    assert str(err).endswith("is already registered")


def test_already_registered_default_name_is_str_of_key():
    err = AlreadyRegisteredError("service")
    assert err.name == "service"
    assert "'service'" in str(err)