# travel_pool/infra/record_store.py
"""
Хранилище записей.

Каждая коллекция это набор сущностей по ID. Ядру нужны только полное чтение,
точечные get/put/remove и атомарная замена всей коллекции.
Блокировок нет: изменения идут по схеме
"прочитать всё → вычислить новую коллекцию → заменить всё",
поэтому при конкурентной записи побеждает последний писатель.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel

from travel_pool.common.logger import get_logger
from travel_pool.infra.redis_client import RedisClient, init_redis

if TYPE_CHECKING:
    from travel_pool.core.groups.models import TravelGroup
    from travel_pool.core.handshake.models import GroupRequest
    from travel_pool.core.requests.models import TravelRequest
    from travel_pool.core.users.models import User

logger = get_logger("record_store")

E = TypeVar("E", bound=BaseModel)


# =============================================================================
# КОЛЛЕКЦИИ
# =============================================================================

class Collection(ABC, Generic[E]):
    """Коллекция сущностей, индексированная по ID."""

    @abstractmethod
    def list(self) -> list[E]:
        """Возвращает все записи в порядке вставки."""

    @abstractmethod
    def replace_all(self, entities: Iterable[E]) -> None:
        """Атомарно заменяет содержимое коллекции."""

    def get(self, entity_id: str) -> Optional[E]:
        for entity in self.list():
            if entity.id == entity_id:
                return entity
        return None

    def put(self, entity: E) -> None:
        """Вставляет запись или заменяет существующую с тем же ID."""
        entities = self.list()
        for index, existing in enumerate(entities):
            if existing.id == entity.id:
                entities[index] = entity
                break
        else:
            entities.append(entity)
        self.replace_all(entities)

    def remove(self, entity_id: str) -> bool:
        """Удаляет запись. Возвращает False, если записи не было."""
        entities = self.list()
        remaining = [entity for entity in entities if entity.id != entity_id]
        if len(remaining) == len(entities):
            return False
        self.replace_all(remaining)
        return True


class InMemoryCollection(Collection[E]):
    """Коллекция в памяти процесса."""

    def __init__(self, entities: Iterable[E] = ()) -> None:
        self._items: dict[str, E] = {entity.id: entity.model_copy(deep=True) for entity in entities}

    def list(self) -> list[E]:
        # Изменения возвращённых копий не видны хранилищу до put()
        return [entity.model_copy(deep=True) for entity in self._items.values()]

    def get(self, entity_id: str) -> Optional[E]:
        entity = self._items.get(entity_id)
        return entity.model_copy(deep=True) if entity is not None else None

    def put(self, entity: E) -> None:
        self._items[entity.id] = entity.model_copy(deep=True)

    def remove(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def replace_all(self, entities: Iterable[E]) -> None:
        self._items = {entity.id: entity.model_copy(deep=True) for entity in entities}


class RedisCollection(Collection[E]):
    """
    Коллекция в Redis: вся коллекция хранится одним JSON массивом под одним ключом.
    replace_all делает один SET и поэтому атомарен. put/remove перезаписывают массив целиком.
    """

    def __init__(self, redis: RedisClient, key: str, model_class: Type[E]) -> None:
        self._redis = redis
        self._key = key
        self._model_class = model_class

    def list(self) -> list[E]:
        return self._redis.get_models(self._key, self._model_class)

    def replace_all(self, entities: Iterable[E]) -> None:
        self._redis.set_models(self._key, list(entities))


# =============================================================================
# ХРАНИЛИЩЕ
# =============================================================================

COLLECTION_KEYS = {
    "users": "travel_users",
    "travel_requests": "travel_requests",
    "travel_groups": "travel_groups",
    "group_requests": "group_requests",
}


class RecordStore:
    """Набор коллекций, с которыми работает ядро."""

    def __init__(
        self,
        users: Collection[User],
        travel_requests: Collection[TravelRequest],
        travel_groups: Collection[TravelGroup],
        group_requests: Collection[GroupRequest],
        redis: RedisClient | None = None,
    ) -> None:
        self.users = users
        self.travel_requests = travel_requests
        self.travel_groups = travel_groups
        self.group_requests = group_requests
        self._redis = redis

    @classmethod
    def in_memory(cls) -> RecordStore:
        """Пустое хранилище в памяти."""
        return cls(
            users=InMemoryCollection(),
            travel_requests=InMemoryCollection(),
            travel_groups=InMemoryCollection(),
            group_requests=InMemoryCollection(),
        )

    @classmethod
    def on_redis(cls, redis: RedisClient) -> RecordStore:
        """Хранилище поверх Redis."""
        from travel_pool.core.groups.models import TravelGroup
        from travel_pool.core.handshake.models import GroupRequest
        from travel_pool.core.requests.models import TravelRequest
        from travel_pool.core.users.models import User

        return cls(
            users=RedisCollection(redis, COLLECTION_KEYS["users"], User),
            travel_requests=RedisCollection(redis, COLLECTION_KEYS["travel_requests"], TravelRequest),
            travel_groups=RedisCollection(redis, COLLECTION_KEYS["travel_groups"], TravelGroup),
            group_requests=RedisCollection(redis, COLLECTION_KEYS["group_requests"], GroupRequest),
            redis=redis,
        )

    def close(self) -> None:
        """Закрывает соединение с Redis, если хранилище работает поверх него."""
        if self._redis is not None:
            self._redis.close()


def build_record_store(settings=None) -> RecordStore:
    """
    Создаёт хранилище по настройкам.

    Args:
        settings: Настройки приложения (если None, берутся из конфига)

    Returns:
        Хранилище записей
    """
    if settings is None:
        from travel_pool.config import settings

    backend = settings.storage.STORAGE_BACKEND

    match backend:
        case "redis":
            redis = init_redis(settings)
            logger.info("Хранилище записей: Redis")
            return RecordStore.on_redis(redis)
        case "memory":
            logger.info("Хранилище записей: память процесса")
            return RecordStore.in_memory()
        case _:
            raise ValueError(f"Неизвестное хранилище: {backend}")
