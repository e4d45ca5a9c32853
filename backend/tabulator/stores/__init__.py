from .base import VoteStore, VoteDraft, VoteRecord, VoteFilter, normalize_score
from .memory import InMemoryVoteStore
from .sql import SqlVoteStore

__all__ = [
    "VoteStore",
    "VoteDraft",
    "VoteRecord",
    "VoteFilter",
    "normalize_score",
    "InMemoryVoteStore",
    "SqlVoteStore",
]
