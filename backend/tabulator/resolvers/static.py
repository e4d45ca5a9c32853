from typing import Iterable, Optional

from .base import EntityResolver, EntityKind


class StaticEntityResolver(EntityResolver):
    """Resolver backed by plain dicts, one per entity kind."""

    def __init__(self, names: Optional[dict[EntityKind, dict[str, str]]] = None):
        self._names: dict[EntityKind, dict[str, str]] = {kind: {} for kind in EntityKind}
        for kind, mapping in (names or {}).items():
            self._names[EntityKind(kind)].update(mapping)

    def register(self, kind: EntityKind, entity_id: str, name: str) -> None:
        self._names[EntityKind(kind)][entity_id] = name

    async def names(self, kind: EntityKind, ids: Iterable[str]) -> dict[str, str]:
        known = self._names[EntityKind(kind)]
        return {i: known[i] for i in set(ids) if i in known}
