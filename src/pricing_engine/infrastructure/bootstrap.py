"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pricing_engine.infrastructure.config import Settings
from pricing_engine.infrastructure.persistence.json_catalog_store import (
    JsonCatalogStore,
)


def settings() -> Settings:
    return Settings()


def catalog_store() -> JsonCatalogStore:
    return JsonCatalogStore(settings().catalog_file)
