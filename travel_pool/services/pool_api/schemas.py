# travel_pool/services/pool_api/schemas.py
"""
Схемы запросов и ответов HTTP API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from travel_pool.common.constants import RequestStatus
from travel_pool.core.groups.models import TravelGroup
from travel_pool.core.handshake.models import AcceptOutcome, GroupRequest
from travel_pool.core.matching.service import MatchCandidate
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.users.models import User


class UpdateRequestStatusDTO(BaseModel):
    status: RequestStatus


class MatchCandidateDTO(BaseModel):
    """Кандидат в попутчики."""

    request: TravelRequest
    score: int
    reasons: list[str]
    user: Optional[User] = None

    @classmethod
    def from_candidate(cls, candidate: MatchCandidate) -> MatchCandidateDTO:
        return cls(
            request=candidate.request,
            score=candidate.score,
            reasons=list(candidate.reasons),
            user=candidate.user,
        )


class AcceptOutcomeDTO(BaseModel):
    """Результат принятия запроса."""

    request: GroupRequest
    group: Optional[TravelGroup] = None
    group_formed: bool

    @classmethod
    def from_outcome(cls, outcome: AcceptOutcome) -> AcceptOutcomeDTO:
        return cls(
            request=outcome.request,
            group=outcome.group,
            group_formed=outcome.group_formed,
        )


class MembershipChangeDTO(BaseModel):
    """Результат выхода из группы."""

    group: Optional[TravelGroup] = None
    group_deleted: bool


class DeletedDTO(BaseModel):
    deleted: bool
