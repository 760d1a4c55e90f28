# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import os
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Callable

import pytest

# Переменные окружения до импорта модулей проекта
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("REDIS_PASSWORD", "")

from travel_pool.common.constants import (
    Gender,
    GenderPreference,
    GroupStatus,
    RequestStatus,
    Route,
    VehicleType,
)
from travel_pool.core.groups.models import ChatMessage, TravelGroup
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.users.models import User
from travel_pool.infra.record_store import RecordStore


TRAVEL_DATE = date(2024, 1, 10)


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "комментарий",
        "PROJECT_NAME": "travel_pool_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "POOL_API_HOST": "127.0.0.1",
        "POOL_API_PORT": 9000,
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "LOG_MAX_BYTES": 1024,
        "STORAGE_BACKEND": "memory",
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_PASSWORD": "",
        "REDIS_NAMESPACE": "travel_pool_test",
        "REDIS_MAX_CONNECTIONS": 5,
        "TOP_MATCHES": 3,
        "MERGE_SCORE_THRESHOLD": 80,
        "REQUEST_EXPIRY_HOURS": 2,
        "GROUP_RETENTION_DAYS": 2,
        "MAX_GROUP_SIZE": 4,
        "STATION_MIN_ADVANCE_HOURS": 2,
        "AIRPORT_MIN_ADVANCE_HOURS": 4,
    }


# =============================================================================
# ФИКСТУРЫ ХРАНИЛИЩА
# =============================================================================

@pytest.fixture
def store() -> RecordStore:
    """Пустое хранилище в памяти."""
    return RecordStore.in_memory()


@pytest.fixture
def users(store: RecordStore) -> dict[str, User]:
    """Пользователи u1..u4 в хранилище."""
    created = {
        "u1": User(id="u1", name="Asha", gender=Gender.FEMALE),
        "u2": User(id="u2", name="Ravi", gender=Gender.MALE),
        "u3": User(id="u3", name="Meera", gender=Gender.FEMALE),
        "u4": User(id="u4", name="Karan", gender=Gender.MALE),
    }
    for user in created.values():
        store.users.put(user)
    return created


# =============================================================================
# ФАБРИКИ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def make_request() -> Callable[..., TravelRequest]:
    """Фабрика заявок со значениями из примера: vit-to-katpadi, 09:00, auto, 2, mixed."""

    def factory(**overrides: Any) -> TravelRequest:
        data: dict[str, Any] = {
            "user_id": "u1",
            "route": Route.VIT_TO_KATPADI,
            "date": TRAVEL_DATE,
            "time": time(9, 0),
            "vehicle_type": VehicleType.AUTO,
            "group_size": 2,
            "gender_preference": GenderPreference.MIXED,
            "status": RequestStatus.ACTIVE,
        }
        data.update(overrides)
        return TravelRequest(**data)

    return factory


@pytest.fixture
def make_group() -> Callable[..., TravelGroup]:
    """Фабрика групп."""

    def factory(**overrides: Any) -> TravelGroup:
        data: dict[str, Any] = {
            "request_id": "req-0",
            "members": ["u1", "u2"],
            "route": Route.VIT_TO_KATPADI,
            "date": TRAVEL_DATE,
            "time": time(9, 0),
            "vehicle_type": VehicleType.AUTO,
            "status": GroupStatus.FORMING,
        }
        data.update(overrides)
        return TravelGroup(**data)

    return factory


@pytest.fixture
def make_message() -> Callable[..., ChatMessage]:
    def factory(user_id: str, text: str, timestamp: datetime | None = None) -> ChatMessage:
        return ChatMessage(
            user_id=user_id,
            user_name=user_id.upper(),
            message=text,
            timestamp=timestamp or datetime(2024, 1, 9, 12, 0),
        )

    return factory
