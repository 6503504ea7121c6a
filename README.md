# injectry

A small dependency-injection registry for asyncio applications.

You register how each service is built and which other services it depends
on, and the registry constructs them for you. Services have one of two
lifetimes:

- **transient**: a fresh object is built every time one is requested;
- **singleton**: the object is built once, lazily, on first request. The
  same instance is returned afterwards. This holds even when several
  requests arrive at once.

Before you use a registry you can validate it. Validation walks the whole
dependency graph and reports dependencies that were never registered and
cycles between services.

## Installation

```
pip install injectry
```

To run the test suite:

```
pip install "injectry[test]"
```

## Registering and resolving services

Services are registered under any hashable key, such as a class or a string.

- Constructors may be plain callables or coroutine functions. If a
  constructor returns an awaitable, the registry awaits it.
- Registration and lookups are awaited.

```python
import asyncio

from injectry.aio_registry import AsyncRegistry
from injectry.dependencies import Singleton, Transient


async def main():
    registry = AsyncRegistry.empty()
    await registry.transient(int, lambda: 1)
    await registry.singleton("template", lambda: "u8 is:")

    await registry.with_deps(str, Transient(int), Singleton("template")).transient(
        lambda num, template: f"{template} {num}"
    )

    registry.validate_all()
    print(await registry.get_transient(str))  # u8 is: 1


asyncio.run(main())
```

### Services with dependencies

`AsyncRegistry.with_deps(key, *deps)` takes the key of the service followed
by its dependencies. Each dependency is wrapped in a marker from
`injectry.dependencies`:

- `Transient(key)` gets a fresh object of that service.
- `Singleton(key)` gets the shared instance of that service.

`with_deps` returns an `AsyncBuilder`. Call its `transient(ctor)` or
`singleton(ctor)` method to finish the registration. The constructor receives
the resolved dependencies as positional arguments, in the order they were
listed.

### Lookups

`get_transient(key)` and `get_singleton(key)` return `None` when:

- the key is not registered with that lifetime, or
- the service's dependencies cannot be fulfilled.

A singleton whose dependencies could not be fulfilled is tried again on the
next request.

### Errors

Registering the same key twice raises `AlreadyRegisteredError` from
`injectry.errors`.

A `Transient` or `Singleton` marker raises `DependenciesMissingError` from its
`resolve` or `resolve_async` method when the registry cannot provide the
value. `DependenciesMissingError` and `LockAcquireError` are both subclasses
of `ResolveError`.

## Validation

```python
registry.validate_all()        # raises ValidationError on missing deps or a cycle
registry.validate_all_full()   # raises FullValidationError with details
print(registry.dotgraph())     # the dependency graph in graphviz "dot" syntax
```

Validation is synchronous, also on `AsyncRegistry`.

`ValidationError.kind` and `FullValidationError.kind` is a
`ValidationErrorKind`, either `CYCLE` or `MISSING`.

`FullValidationError` carries the details:

- `missing` lists a `MissingDependencies` entry for each service with absent
  dependencies. Its `ty` and `deps` hold `(key, name)` pairs.
- `node` names the service at which a cycle was found.

The result of `validate_all` is cached until another service is registered.

`injectry.validation.DependencyValidator` performs these checks. It can also
be used on its own: record each registration with `add_transient(key, deps)`
or `add_singleton(key, deps)`, where `deps` are the keys it depends on.

## Auto-registration and the global registry

Functions decorated with `injectry.registration.autoregister_async` receive a
registry and register services into it. They may be coroutine functions.

- `AsyncRegistry.autoregistered()` builds a new registry and runs all of these
  functions concurrently.
- `AsyncRegistry.global_registry()` returns one process-wide registry built
  this way on first use.
- `AsyncRegistry.reset_global()` clears the global registry and runs the
  functions again. Nothing else may use the global registry during the reset.

`autoregister` records synchronous registration functions, and
`registration_funcs()` lists them. `async_registration_funcs()` lists the
asynchronous ones. `AsyncRegistry` only runs functions submitted with
`autoregister_async`.

## Building objects without a registry class

`injectry.dependencies.build(registry, key, deps, ctor)` and its awaitable
counterpart `build_async` can be used with any object that provides:

- `get_transient(key)`
- `get_singleton(key)`
- `validate(key)`

They resolve the given dependency markers and call `ctor` with the values.
They return `None` if `validate` raises `ValidationError`.

## What this package does not do

- There is no synchronous registry class. Every registry lookup and
  registration in this package is awaited.
- There is no lazily resolved holder for transients.
- There is no command-line program.