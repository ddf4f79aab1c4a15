"""Dependency injection for FastAPI: ServiceContainer singleton."""

from __future__ import annotations

from protoforge.service.container import ServiceContainer

_container: ServiceContainer | None = None


def init_container(container: ServiceContainer) -> None:
    """Set the global ServiceContainer (called at app startup)."""
    global _container  # noqa: PLW0603
    _container = container


def get_container() -> ServiceContainer:
    """FastAPI ``Depends`` provider for ServiceContainer."""
    if _container is None:
        raise RuntimeError("ServiceContainer not initialised; call init_container() first")
    return _container


def reset_container() -> None:
    """Clear the global ServiceContainer (for tests)."""
    global _container  # noqa: PLW0603
    _container = None
