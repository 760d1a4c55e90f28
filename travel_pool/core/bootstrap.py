# travel_pool/core/bootstrap.py
"""
Подготовка хранилища при старте сессии.
"""

from __future__ import annotations

from datetime import datetime

from travel_pool.common.logger import get_logger
from travel_pool.core.groups.service import GroupService
from travel_pool.core.requests.service import TravelRequestService
from travel_pool.infra.record_store import RecordStore

logger = get_logger("bootstrap")


def initialize_storage(store: RecordStore, now: datetime | None = None) -> tuple[int, int]:
    """
    Удаляет просроченные заявки и устаревшие группы.

    Args:
        store: Хранилище записей
        now: Текущее время (для тестов)

    Returns:
        (удалено заявок, удалено групп)
    """
    now = now or datetime.now()

    removed_requests = TravelRequestService(store).sweep_expired(now)
    removed_groups = GroupService(store).sweep_old_groups(now)

    logger.info(
        f"Хранилище подготовлено: удалено заявок {removed_requests}, групп {removed_groups}",
    )

    return removed_requests, removed_groups
