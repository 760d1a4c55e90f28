# travel_pool/infra/redis_client.py
"""
Клиент Redis для хранения коллекций записей.
Синхронный: операции ядра выполняются до конца без переключений.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar, Type

import redis
from pydantic import BaseModel

from travel_pool.common.logger import get_logger

logger = get_logger("redis")

T = TypeVar("T", bound=BaseModel)


class CorruptCollectionError(ValueError):
    """Сохранённая коллекция не является JSON массивом."""


class RedisClient:
    """
    Тонкая обёртка над redis.Redis.
    Поддерживает:
    - Пространство имён для ключей
    - JSON операции
    - Типизированные get/set с Pydantic моделями
    """

    def __init__(self, client: redis.Redis | None = None, namespace: str = "travel_pool") -> None:
        """
        Args:
            client: Готовый клиент Redis (например, в тестах)
            namespace: Префикс ключей
        """
        self._client = client
        self._namespace = namespace

    @property
    def client(self) -> redis.Redis:
        """Возвращает клиент Redis."""
        if self._client is None:
            raise RuntimeError("Redis клиент не инициализирован. Вызовите connect() сначала.")
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _make_key(self, key: str) -> str:
        """Добавляет namespace к ключу."""
        return f"{self._namespace}:{key}"

    def connect(self, url: str | None = None, max_connections: int = 20) -> None:
        """
        Подключается к Redis.

        Args:
            url: URL Redis (если None, берётся из конфига)
            max_connections: Максимальное количество соединений
        """
        if self._client is not None:
            return

        if url is None:
            from travel_pool.config import settings
            url = settings.redis.url
            max_connections = settings.redis.REDIS_MAX_CONNECTIONS
            self._namespace = settings.redis.REDIS_NAMESPACE

        logger.info("Подключение к Redis...")

        self._client = redis.Redis.from_url(
            url,
            max_connections=max_connections,
            decode_responses=True,
        )
        self._client.ping()

        logger.info("Подключение к Redis установлено")

    def close(self) -> None:
        """Закрывает соединение с Redis."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Соединение с Redis закрыто")

    # =========================================================================
    # БАЗОВЫЕ ОПЕРАЦИИ
    # =========================================================================

    def get(self, key: str) -> str | None:
        return self.client.get(self._make_key(key))

    def set(self, key: str, value: str) -> bool:
        return bool(self.client.set(self._make_key(key), value))

    # =========================================================================
    # JSON ОПЕРАЦИИ
    # =========================================================================

    def get_json(self, key: str) -> Any:
        """Получает и парсит JSON. Повреждённое значение считается отсутствующим."""
        data = self.get(key)
        if data is None:
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Повреждённый JSON по ключу {key}: {e}")
            return None

    def set_json(self, key: str, data: Any) -> bool:
        """Сериализует и сохраняет JSON."""
        return self.set(key, json.dumps(data, ensure_ascii=False, default=str))

    # =========================================================================
    # ТИПИЗИРОВАННЫЕ ОПЕРАЦИИ (PYDANTIC)
    # =========================================================================

    def get_models(self, key: str, model_class: Type[T]) -> list[T]:
        """
        Получает список моделей, сохранённый одним JSON массивом.

        Args:
            key: Ключ
            model_class: Класс модели Pydantic

        Returns:
            Список моделей (пустой, если ключа нет)

        Raises:
            CorruptCollectionError: Значение не читается как JSON массив
        """
        data = self.get(key)
        if data is None:
            return []

        try:
            raw = json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Повреждённая коллекция по ключу {key}: {e}")
            raise CorruptCollectionError(f"Повреждённая коллекция по ключу {key}") from e

        if not isinstance(raw, list):
            logger.error(f"Коллекция по ключу {key} не является массивом")
            raise CorruptCollectionError(f"Коллекция по ключу {key} не является массивом")

        return [model_class.model_validate(item) for item in raw]

    def set_models(self, key: str, models: list[BaseModel]) -> bool:
        """Сохраняет список моделей одним значением (атомарная замена)."""
        return self.set_json(key, [model.model_dump(mode="json") for model in models])


def init_redis(settings=None) -> RedisClient:
    """
    Создаёт клиент и подключается к Redis.

    Args:
        settings: Настройки приложения (если None, берутся из конфига)
    """
    if settings is None:
        from travel_pool.config import settings

    client = RedisClient(namespace=settings.redis.REDIS_NAMESPACE)
    client.connect(
        url=settings.redis.url,
        max_connections=settings.redis.REDIS_MAX_CONNECTIONS,
    )
    return client
