# travel_pool/services/pool_api/routes.py
"""
HTTP маршруты Pool API: заявки, запросы на объединение, группы.
Обработчики синхронные, FastAPI выполняет их в пуле потоков.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from travel_pool.core.errors import BookingRejected, InvalidTransition
from travel_pool.core.groups.models import ChatMessage, ChatMessageCreateDTO, MergeTargetDTO, TravelGroup
from travel_pool.core.groups.service import GroupService
from travel_pool.core.handshake.models import GroupRequest, GroupRequestCreateDTO
from travel_pool.core.handshake.service import HandshakeService
from travel_pool.core.matching.service import MatchingService
from travel_pool.core.requests.models import TravelRequest, TravelRequestCreateDTO
from travel_pool.core.requests.service import TravelRequestService
from travel_pool.services.pool_api.dependencies import (
    get_group_service,
    get_handshake_service,
    get_matching_service,
    get_request_service,
)
from travel_pool.services.pool_api.schemas import (
    AcceptOutcomeDTO,
    DeletedDTO,
    MatchCandidateDTO,
    MembershipChangeDTO,
    UpdateRequestStatusDTO,
)

requests_router = APIRouter(prefix="/requests", tags=["Travel requests"])
handshakes_router = APIRouter(prefix="/group-requests", tags=["Group requests"])
groups_router = APIRouter(prefix="/groups", tags=["Groups"])


# =============================================================================
# ЗАЯВКИ
# =============================================================================

@requests_router.post("/", response_model=TravelRequest, status_code=status.HTTP_201_CREATED)
def create_request(
    request: TravelRequestCreateDTO,
    service: TravelRequestService = Depends(get_request_service),
):
    try:
        return service.create_request(request)
    except BookingRejected as e:
        raise HTTPException(status_code=400, detail=str(e))


@requests_router.get("/", response_model=List[TravelRequest])
def list_requests(
    user_id: Optional[str] = None,
    active_only: bool = True,
    service: TravelRequestService = Depends(get_request_service),
):
    if user_id is None:
        return service.list_active()
    return service.list_for_user(user_id, active_only=active_only)


@requests_router.get("/{request_id}", response_model=TravelRequest)
def get_request(
    request_id: str,
    service: TravelRequestService = Depends(get_request_service),
):
    request = service.get_request(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Travel request not found")
    return request


@requests_router.get("/{request_id}/matches", response_model=List[MatchCandidateDTO])
def get_matches(
    request_id: str,
    limit: Optional[int] = None,
    service: MatchingService = Depends(get_matching_service),
):
    candidates = service.find_matches_for_request(request_id)
    if candidates is None:
        raise HTTPException(status_code=404, detail="Travel request not found")
    return [MatchCandidateDTO.from_candidate(c) for c in candidates.top(limit)]


@requests_router.patch("/{request_id}/status", response_model=TravelRequest)
def update_request_status(
    request_id: str,
    request: UpdateRequestStatusDTO,
    service: TravelRequestService = Depends(get_request_service),
):
    try:
        updated = service.transition(request_id, request.status)
    except InvalidTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Travel request not found")
    return updated


# =============================================================================
# ЗАПРОСЫ НА ОБЪЕДИНЕНИЕ
# =============================================================================

@handshakes_router.post("/", response_model=GroupRequest, status_code=status.HTTP_201_CREATED)
def send_group_request(
    request: GroupRequestCreateDTO,
    service: HandshakeService = Depends(get_handshake_service),
):
    return service.send(
        request.from_user_id,
        request.to_user_id,
        request_type=request.request_type,
        group_id=request.group_id,
    )


@handshakes_router.get("/incoming/{user_id}", response_model=List[GroupRequest])
def incoming_group_requests(
    user_id: str,
    service: HandshakeService = Depends(get_handshake_service),
):
    return service.incoming_pending(user_id)


@handshakes_router.get("/outgoing/{user_id}", response_model=List[GroupRequest])
def outgoing_group_requests(
    user_id: str,
    service: HandshakeService = Depends(get_handshake_service),
):
    return service.outgoing_pending(user_id)


def _ensure_pending(service: HandshakeService, request_id: str) -> None:
    existing = service.get_request(request_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Group request not found")
    if not existing.is_pending:
        raise HTTPException(status_code=409, detail=f"Group request already {existing.status.value}")


@handshakes_router.post("/{request_id}/accept", response_model=AcceptOutcomeDTO)
def accept_group_request(
    request_id: str,
    service: HandshakeService = Depends(get_handshake_service),
):
    _ensure_pending(service, request_id)
    return AcceptOutcomeDTO.from_outcome(service.accept(request_id))


@handshakes_router.post("/{request_id}/reject", response_model=GroupRequest)
def reject_group_request(
    request_id: str,
    service: HandshakeService = Depends(get_handshake_service),
):
    _ensure_pending(service, request_id)
    return service.reject(request_id)


@handshakes_router.post("/{request_id}/cancel", response_model=GroupRequest)
def cancel_group_request(
    request_id: str,
    service: HandshakeService = Depends(get_handshake_service),
):
    _ensure_pending(service, request_id)
    return service.cancel(request_id)


# =============================================================================
# ГРУППЫ
# =============================================================================

def _require_group(service: GroupService, group_id: str) -> TravelGroup:
    group = service.get_group(group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


@groups_router.get("/", response_model=List[TravelGroup])
def list_groups(
    user_id: Optional[str] = None,
    include_completed: bool = False,
    service: GroupService = Depends(get_group_service),
):
    if user_id is None:
        return service.list_groups(include_completed=include_completed)
    return service.list_for_user(user_id, include_completed=include_completed)


@groups_router.get("/{group_id}", response_model=TravelGroup)
def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    return _require_group(service, group_id)


@groups_router.post("/{group_id}/confirm", response_model=TravelGroup)
def confirm_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    _require_group(service, group_id)
    return service.confirm(group_id)


@groups_router.post("/{group_id}/members/{user_id}/confirm", response_model=TravelGroup)
def confirm_member(
    group_id: str,
    user_id: str,
    service: GroupService = Depends(get_group_service),
):
    group = _require_group(service, group_id)
    if not group.has_member(user_id):
        raise HTTPException(status_code=400, detail="User is not a member of this group")
    return service.confirm_member(group_id, user_id)


@groups_router.delete("/{group_id}/members/{user_id}", response_model=MembershipChangeDTO)
def leave_group(
    group_id: str,
    user_id: str,
    service: GroupService = Depends(get_group_service),
):
    _require_group(service, group_id)
    group = service.remove_member(group_id, user_id)
    return MembershipChangeDTO(group=group, group_deleted=group is None)


@groups_router.get("/{group_id}/merge-targets", response_model=List[TravelGroup])
def merge_targets(
    group_id: str,
    user_id: str,
    service: GroupService = Depends(get_group_service),
):
    _require_group(service, group_id)
    return service.merge_targets(group_id, user_id)


@groups_router.post("/{group_id}/merge", response_model=TravelGroup)
def merge_group(
    group_id: str,
    request: MergeTargetDTO,
    service: GroupService = Depends(get_group_service),
):
    if request.target_group_id == group_id:
        raise HTTPException(status_code=400, detail="Cannot merge a group into itself")
    _require_group(service, group_id)
    _require_group(service, request.target_group_id)
    return service.merge(group_id, request.target_group_id)


@groups_router.delete("/{group_id}", response_model=DeletedDTO)
def delete_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    return DeletedDTO(deleted=service.delete(group_id))


@groups_router.get("/{group_id}/messages", response_model=List[ChatMessage])
def list_messages(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    _require_group(service, group_id)
    return service.messages(group_id)


@groups_router.post("/{group_id}/messages", response_model=ChatMessage, status_code=status.HTTP_201_CREATED)
def post_message(
    group_id: str,
    request: ChatMessageCreateDTO,
    service: GroupService = Depends(get_group_service),
):
    _require_group(service, group_id)
    message = service.post_message(group_id, request.user_id, request.message)
    if message is None:
        raise HTTPException(status_code=400, detail="Message is empty")
    return message
