from .intake import VoteIntakeValidator
from .ranking import RankingService, RankingOutput, CandidateStanding, aggregate_scores
from .mutation import VoteMutationGateway
from .ledger import VoteLedger, ResolvedVote

__all__ = [
    "VoteIntakeValidator",
    "RankingService",
    "RankingOutput",
    "CandidateStanding",
    "aggregate_scores",
    "VoteMutationGateway",
    "VoteLedger",
    "ResolvedVote",
]
