from .base import EntityResolver, EntityKind
from .static import StaticEntityResolver
from .sql import SqlEntityResolver

__all__ = [
    "EntityResolver",
    "EntityKind",
    "StaticEntityResolver",
    "SqlEntityResolver",
]
