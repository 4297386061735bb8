"""Dependency injection providers for the FastAPI application.

Route handlers receive the shared TreeStore and the configured SpaceSettings
through these providers, so tests can swap either with
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends

from models.space_report import SpaceSettings
from models.store import TreeStore


# Created once at startup by the application lifespan
_tree_store: TreeStore | None = None


def get_tree_store() -> TreeStore:
    """Get the shared TreeStore instance.

    Returns:
        The shared TreeStore.

    Raises:
        RuntimeError: If the store hasn't been initialized yet.
    """
    if _tree_store is None:
        raise RuntimeError(
            "TreeStore not initialized. Call initialize_tree_store() first."
        )
    return _tree_store


def initialize_tree_store() -> TreeStore:
    """Create the shared TreeStore, replacing any previous one.

    Returns:
        The newly created TreeStore.
    """
    global _tree_store
    _tree_store = TreeStore()
    return _tree_store


def shutdown_tree_store() -> None:
    """Drop every stored tree and release the shared store."""
    global _tree_store

    if _tree_store is not None:
        _tree_store.clear()
    _tree_store = None


def get_space_settings() -> SpaceSettings:
    """Read space settings from the environment on each request."""
    return SpaceSettings.from_env()


TreeStoreDep = Annotated[TreeStore, Depends(get_tree_store)]
SpaceSettingsDep = Annotated[SpaceSettings, Depends(get_space_settings)]
