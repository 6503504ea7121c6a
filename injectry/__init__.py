"""An asyncio dependency-injection registry with transient and singleton lifetimes."""

__version__ = "0.1.0"

__all__ = [
    "aio_builders",
    "aio_registry",
    "dependencies",
    "errors",
    "registration",
    "validation",
]