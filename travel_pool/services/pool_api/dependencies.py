# travel_pool/services/pool_api/dependencies.py
"""
Зависимости FastAPI: хранилище и доменные сервисы.
"""

from fastapi import Request

from travel_pool.core.groups.service import GroupService
from travel_pool.core.handshake.service import HandshakeService
from travel_pool.core.matching.service import MatchingService
from travel_pool.core.requests.service import TravelRequestService
from travel_pool.infra.record_store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_request_service(request: Request) -> TravelRequestService:
    return TravelRequestService(get_record_store(request))


def get_matching_service(request: Request) -> MatchingService:
    return MatchingService(get_record_store(request))


def get_group_service(request: Request) -> GroupService:
    return GroupService(get_record_store(request))


def get_handshake_service(request: Request) -> HandshakeService:
    store = get_record_store(request)
    return HandshakeService(store, GroupService(store))
