# travel_pool/core/handshake/models.py
"""
Модели запросов на объединение в группу.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from travel_pool.common.constants import GroupRequestStatus, GroupRequestType
from travel_pool.core.groups.models import TravelGroup


class GroupRequest(BaseModel):
    """Запрос одного пользователя другому на совместную поездку."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID запроса")
    from_user_id: str = Field(..., description="Отправитель")
    to_user_id: str = Field(..., description="Получатель")
    request_type: GroupRequestType = Field(GroupRequestType.DIRECT_REQUEST, description="Тип запроса")
    group_id: Optional[str] = Field(None, description="ID группы, к которой относится запрос")
    status: GroupRequestStatus = Field(GroupRequestStatus.PENDING, description="Статус запроса")
    created_at: datetime = Field(default_factory=datetime.now, description="Время создания")

    @property
    def is_pending(self) -> bool:
        return self.status == GroupRequestStatus.PENDING


class GroupRequestCreateDTO(BaseModel):
    """DTO для отправки запроса."""

    from_user_id: str
    to_user_id: str
    request_type: GroupRequestType = GroupRequestType.DIRECT_REQUEST
    group_id: Optional[str] = None


@dataclass
class AcceptOutcome:
    """
    Результат принятия запроса.

    Запрос принимается всегда; группа создаётся, только если у пары
    нашлись совместимые активные заявки. group is None означает,
    что запрос принят, но группа не сформирована.
    """
    request: GroupRequest
    group: Optional[TravelGroup] = None

    @property
    def group_formed(self) -> bool:
        return self.group is not None
