"""Root document served at ``api``, the starting point for link navigation."""

from __future__ import annotations

from .links import Entity


class RootEntity(Entity):
    """The API root. Its links lead to every other resource collection."""

    product: str | None = None
    version: str | None = None
    instance_name: str | None = None
