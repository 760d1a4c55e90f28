# travel_pool/core/users/models.py
"""
Модель пользователя.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from travel_pool.common.constants import Gender

UNKNOWN_USER_NAME = "Unknown User"


class User(BaseModel):
    """Модель пользователя (студента)."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID пользователя")
    name: str = Field(..., description="Отображаемое имя")
    username: Optional[str] = Field(None, description="Уникальный никнейм")
    email: Optional[str] = Field(None, description="Email")
    registration_number: Optional[str] = Field(None, description="Номер студенческого билета")
    phone: Optional[str] = Field(None, description="Номер телефона")
    gender: Gender = Field(..., description="Пол")
    created_at: datetime = Field(default_factory=datetime.now, description="Дата регистрации")

    @property
    def display_name(self) -> str:
        """Отображаемое имя (username или имя)."""
        if self.username:
            return f"@{self.username}"
        return self.name
