# travel_pool/core/handshake/service.py
"""
Сервис запросов на объединение.
Отправка, принятие и отклонение запросов между двумя пользователями.
Принятие запроса создаёт группу, если у пары есть совместимые заявки.
"""

from __future__ import annotations

from typing import Optional

from travel_pool.common.constants import GroupRequestStatus, GroupRequestType
from travel_pool.common.logger import get_logger
from travel_pool.core.groups.service import GroupService
from travel_pool.core.handshake.models import AcceptOutcome, GroupRequest
from travel_pool.core.matching.scorer import are_loosely_compatible
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.state_machine import GroupRequestStateMachine
from travel_pool.infra.record_store import RecordStore

logger = get_logger("handshake")


class HandshakeService:
    """Протокол запрос/принятие/отклонение между двумя пользователями."""

    def __init__(self, store: RecordStore, groups: GroupService | None = None) -> None:
        """
        Args:
            store: Хранилище записей
            groups: Сервис групп (создаётся по хранилищу, если не передан)
        """
        self._store = store
        self._groups = groups or GroupService(store)

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    def get_request(self, request_id: str) -> Optional[GroupRequest]:
        return self._store.group_requests.get(request_id)

    def incoming_pending(self, user_id: str) -> list[GroupRequest]:
        """Ожидающие ответа запросы, адресованные пользователю."""
        return [
            request
            for request in self._store.group_requests.list()
            if request.to_user_id == user_id and request.is_pending
        ]

    def outgoing_pending(self, user_id: str) -> list[GroupRequest]:
        """Ожидающие ответа запросы, отправленные пользователем."""
        return [
            request
            for request in self._store.group_requests.list()
            if request.from_user_id == user_id and request.is_pending
        ]

    # =========================================================================
    # ПРОТОКОЛ
    # =========================================================================

    def send(
        self,
        from_user_id: str,
        to_user_id: str,
        request_type: GroupRequestType = GroupRequestType.DIRECT_REQUEST,
        group_id: str | None = None,
    ) -> GroupRequest:
        """
        Создаёт запрос в статусе pending.
        Повторные запросы между той же парой не отсекаются.
        """
        request = GroupRequest(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            request_type=request_type,
            group_id=group_id,
            status=GroupRequestStatus.PENDING,
        )
        self._store.group_requests.put(request)

        logger.info(f"Запрос {request.id}: {from_user_id} -> {to_user_id} ({request_type.value})")

        return request

    def reject(self, request_id: str) -> Optional[GroupRequest]:
        """Отклоняет запрос. Других последствий нет."""
        return self._close(request_id, GroupRequestStatus.REJECTED)

    def cancel(self, request_id: str) -> Optional[GroupRequest]:
        """Отзыв запроса отправителем, хранится как отклонение."""
        return self._close(request_id, GroupRequestStatus.REJECTED)

    def accept(self, request_id: str) -> Optional[AcceptOutcome]:
        """
        Принимает запрос и пытается сформировать группу.

        Ищет среди активных заявок получателя первую, для которой у отправителя
        есть заявка с тем же маршрутом, датой и разницей во времени до 15 минут.
        Пол, транспорт и размер группы не учитываются.

        Returns:
            AcceptOutcome (group is None, если совместимой пары нет)
            или None, если запроса нет или он уже закрыт
        """
        request = self._close(request_id, GroupRequestStatus.ACCEPTED)
        if request is None:
            return None

        pair = self._find_compatible_pair(request.to_user_id, request.from_user_id)
        if pair is None:
            logger.warning(
                f"Запрос {request_id} принят, но совместимых заявок нет: группа не создана",
            )
            return AcceptOutcome(request=request, group=None)

        accepter_request, _ = pair
        group = self._groups.create([request.to_user_id, request.from_user_id], accepter_request)

        return AcceptOutcome(request=request, group=group)

    def _close(self, request_id: str, status: GroupRequestStatus) -> Optional[GroupRequest]:
        request = self._store.group_requests.get(request_id)
        if request is None:
            return None

        if not GroupRequestStateMachine.can_transition(request.status, status):
            logger.debug(f"Запрос {request_id} уже в статусе {request.status.value}")
            return None

        request.status = status
        self._store.group_requests.put(request)

        logger.info(f"Запрос {request_id}: {status.value}")

        return request

    def _find_compatible_pair(
        self,
        accepter_id: str,
        requester_id: str,
    ) -> Optional[tuple[TravelRequest, TravelRequest]]:
        requests = self._store.travel_requests.list()
        accepter_requests = [r for r in requests if r.user_id == accepter_id and r.is_active]
        requester_requests = [r for r in requests if r.user_id == requester_id and r.is_active]

        for accepter_request in accepter_requests:
            for requester_request in requester_requests:
                if are_loosely_compatible(accepter_request, requester_request):
                    return accepter_request, requester_request

        return None
