"""
Доменный слой (Core Domain).
Подбор попутчиков и жизненный цикл заявок, групп и запросов на объединение.
"""

from travel_pool.core.users import User
from travel_pool.core.requests import TravelRequest
from travel_pool.core.groups import ChatMessage, TravelGroup
from travel_pool.core.handshake import AcceptOutcome, GroupRequest
from travel_pool.core.groups.service import GroupService
from travel_pool.core.requests.service import TravelRequestService
from travel_pool.core.handshake.service import HandshakeService
from travel_pool.core.matching import MatchingService, score_requests
from travel_pool.core.bootstrap import initialize_storage

__all__ = [
    "User",
    "TravelRequest",
    "ChatMessage",
    "TravelGroup",
    "AcceptOutcome",
    "GroupRequest",
    "GroupService",
    "TravelRequestService",
    "HandshakeService",
    "MatchingService",
    "score_requests",
    "initialize_storage",
]
