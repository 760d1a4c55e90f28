# travel_pool/core/groups/models.py
"""
Модели данных групп поездок и чата.
"""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from travel_pool.common.constants import GroupStatus, Route, VehicleType


class ChatMessage(BaseModel):
    """Сообщение в чате группы."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID сообщения")
    user_id: str = Field(..., description="ID автора")
    user_name: str = Field(..., description="Имя автора на момент отправки")
    message: str = Field(..., description="Текст сообщения")
    timestamp: dt.datetime = Field(default_factory=dt.datetime.now, description="Время отправки")


class TravelGroup(BaseModel):
    """Группа попутчиков."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID группы")
    request_id: str = Field(..., description="ID заявки, из которой создана группа")
    members: list[str] = Field(default_factory=list, description="ID участников")
    route: Route = Field(..., description="Маршрут")
    date: dt.date = Field(..., description="Дата поездки")
    time: dt.time = Field(..., description="Время отправления")
    vehicle_type: VehicleType = Field(..., description="Тип транспорта")
    status: GroupStatus = Field(GroupStatus.FORMING, description="Статус группы")
    confirmed_members: list[str] = Field(default_factory=list, description="Подтвердившие участники")
    chat_messages: list[ChatMessage] = Field(default_factory=list, description="История чата")
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, description="Время создания")

    @property
    def is_active(self) -> bool:
        """Группа ещё не завершена."""
        return self.status != GroupStatus.COMPLETED

    @property
    def is_fully_confirmed(self) -> bool:
        """Все участники подтвердили поездку (минимум двое)."""
        confirmed = set(self.confirmed_members)
        return len(self.members) >= 2 and all(member in confirmed for member in self.members)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.members


class ChatMessageCreateDTO(BaseModel):
    """DTO для отправки сообщения."""

    user_id: str
    message: str = Field(..., min_length=1)


class MergeTargetDTO(BaseModel):
    """DTO для слияния групп."""

    target_group_id: str
