from .routes import router
from .dependencies import get_vote_ledger

__all__ = ["router", "get_vote_ledger"]
