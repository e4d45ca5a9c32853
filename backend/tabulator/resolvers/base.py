from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable


class EntityKind(str, Enum):
    EVENT = "event"
    CATEGORY = "category"
    CANDIDATE = "candidate"
    JUDGE = "judge"


class EntityResolver(ABC):
    """Looks up display names for the references stored on votes.

    The ledger never checks that a reference exists; ids the resolver does
    not know are simply left out of the returned mapping.
    """

    @abstractmethod
    async def names(self, kind: EntityKind, ids: Iterable[str]) -> dict[str, str]:
        """Return ``{id: name}`` for the ids that could be resolved."""
        pass
