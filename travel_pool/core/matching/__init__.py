"""
Домен подбора попутчиков.
Оценка совместимости заявок и ранжирование кандидатов.
"""

from travel_pool.core.matching.scorer import (
    Incompatible,
    MatchResult,
    Scored,
    are_loosely_compatible,
    can_merge_requests,
    compatible_group_size,
    score_requests,
)
from travel_pool.core.matching.service import MatchCandidate, MatchCandidates, MatchingService

__all__ = [
    "Incompatible",
    "MatchResult",
    "Scored",
    "are_loosely_compatible",
    "can_merge_requests",
    "compatible_group_size",
    "score_requests",
    "MatchCandidate",
    "MatchCandidates",
    "MatchingService",
]
