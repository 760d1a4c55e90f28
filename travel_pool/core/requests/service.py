# travel_pool/core/requests/service.py
"""
Сервис заявок на поездку.
Создание заявок, переходы статусов и очистка просроченных заявок.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from travel_pool.common.constants import RequestStatus
from travel_pool.common.logger import get_logger
from travel_pool.core.errors import BookingRejected, InvalidTransition
from travel_pool.core.groups.service import GroupService
from travel_pool.core.requests.models import TravelRequest, TravelRequestCreateDTO
from travel_pool.core.state_machine import RequestStateMachine
from travel_pool.infra.record_store import RecordStore

logger = get_logger("requests")


class TravelRequestService:
    """
    Сервис заявок.

    Статусы matched и expired зарезервированы: ни один рабочий сценарий
    их не выставляет. Просроченные заявки удаляются очисткой целиком,
    принятие запроса на объединение статус заявок не меняет.
    """

    def __init__(
        self,
        store: RecordStore,
        expiry_hours: float | None = None,
        station_min_advance_hours: float | None = None,
        airport_min_advance_hours: float | None = None,
    ) -> None:
        """
        Args:
            store: Хранилище записей
            expiry_hours: Через сколько часов после отправления заявка удаляется
            station_min_advance_hours: Минимальный запас времени для маршрутов до станции
            airport_min_advance_hours: Минимальный запас времени для маршрутов до аэропорта
        """
        from travel_pool.config import settings

        self._store = store
        self._groups = GroupService(store)
        self._expiry = timedelta(
            hours=expiry_hours if expiry_hours is not None else settings.lifecycle.REQUEST_EXPIRY_HOURS,
        )
        self._station_advance = timedelta(
            hours=(
                station_min_advance_hours
                if station_min_advance_hours is not None
                else settings.lifecycle.STATION_MIN_ADVANCE_HOURS
            ),
        )
        self._airport_advance = timedelta(
            hours=(
                airport_min_advance_hours
                if airport_min_advance_hours is not None
                else settings.lifecycle.AIRPORT_MIN_ADVANCE_HOURS
            ),
        )

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    def get_request(self, request_id: str) -> Optional[TravelRequest]:
        return self._store.travel_requests.get(request_id)

    def list_for_user(self, user_id: str, active_only: bool = False) -> list[TravelRequest]:
        """Заявки пользователя."""
        return [
            request
            for request in self._store.travel_requests.list()
            if request.user_id == user_id and (request.is_active or not active_only)
        ]

    def list_active(self, exclude_user_id: str | None = None) -> list[TravelRequest]:
        """Активные заявки, кроме заявок указанного пользователя."""
        return [
            request
            for request in self._store.travel_requests.list()
            if request.is_active and request.user_id != exclude_user_id
        ]

    # =========================================================================
    # ЖИЗНЕННЫЙ ЦИКЛ
    # =========================================================================

    def create_request(
        self,
        dto: TravelRequestCreateDTO,
        now: datetime | None = None,
    ) -> TravelRequest:
        """
        Создаёт активную заявку.

        Args:
            dto: Данные заявки
            now: Текущее время (для тестов)

        Returns:
            Созданная заявка

        Raises:
            BookingRejected: Нарушены правила бронирования
        """
        now = now or datetime.now()

        if self._groups.active_group_for_user_on_date(dto.user_id, dto.date) is not None:
            raise BookingRejected(
                "У пользователя уже есть группа на эту дату. "
                "На одну дату можно состоять только в одной группе."
            )

        scheduled_at = datetime.combine(dto.date, dto.time)
        if scheduled_at <= now:
            raise BookingRejected("Время отправления должно быть в будущем")

        min_advance = self._airport_advance if dto.route.is_airport else self._station_advance
        if scheduled_at - now < min_advance:
            hours = min_advance.total_seconds() / 3600
            raise BookingRejected(
                f"Для маршрута {dto.route.value} заявку нужно создать минимум за {hours:g} ч."
            )

        request = TravelRequest(**dto.model_dump(), status=RequestStatus.ACTIVE)
        self._store.travel_requests.put(request)

        logger.info(f"Заявка {request.id} создана пользователем {request.user_id}")

        return request

    def transition(self, request_id: str, new_status: RequestStatus) -> Optional[TravelRequest]:
        """
        Переводит заявку в новый статус.

        Returns:
            Обновлённая заявка или None, если заявки нет

        Raises:
            InvalidTransition: Переход не разрешён
        """
        request = self._store.travel_requests.get(request_id)
        if request is None:
            return None

        if not RequestStateMachine.can_transition(request.status, new_status):
            raise InvalidTransition("заявки", request.status.value, new_status.value)

        request.status = new_status
        self._store.travel_requests.put(request)

        logger.info(f"Статус заявки {request_id} обновлён на {new_status.value}")

        return request

    def sweep_expired(self, now: datetime | None = None) -> int:
        """
        Удаляет заявки, время отправления которых прошло более чем на срок хранения.

        Args:
            now: Текущее время (для тестов)

        Returns:
            Количество удалённых заявок
        """
        now = now or datetime.now()
        cutoff = now - self._expiry

        requests = self._store.travel_requests.list()
        valid = [request for request in requests if request.scheduled_at > cutoff]
        removed = len(requests) - len(valid)

        self._store.travel_requests.replace_all(valid)

        if removed:
            logger.info(f"Удалено просроченных заявок: {removed}")

        return removed
