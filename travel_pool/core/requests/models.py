# travel_pool/core/requests/models.py
"""
Модели данных заявок на поездку.
"""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from travel_pool.common.constants import (
    GenderPreference,
    RequestStatus,
    Route,
    VehicleType,
)


class TravelRequest(BaseModel):
    """Заявка пользователя на совместную поездку."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID заявки")
    user_id: str = Field(..., description="ID владельца заявки")
    route: Route = Field(..., description="Маршрут")
    date: dt.date = Field(..., description="Дата поездки")
    time: dt.time = Field(..., description="Время отправления")
    vehicle_type: VehicleType = Field(..., description="Тип транспорта")
    group_size: int = Field(..., ge=2, le=4, description="Желаемый размер группы")
    gender_preference: GenderPreference = Field(..., description="Предпочтение по составу")
    status: RequestStatus = Field(RequestStatus.ACTIVE, description="Статус заявки")
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, description="Время создания")

    @property
    def scheduled_at(self) -> dt.datetime:
        """Дата и время отправления."""
        return dt.datetime.combine(self.date, self.time)

    @property
    def is_active(self) -> bool:
        """Активна ли заявка."""
        return self.status == RequestStatus.ACTIVE


class TravelRequestCreateDTO(BaseModel):
    """DTO для создания заявки."""

    user_id: str
    route: Route
    date: dt.date
    time: dt.time
    vehicle_type: VehicleType
    group_size: int = Field(..., ge=2, le=4)
    gender_preference: GenderPreference
