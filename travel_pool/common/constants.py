# travel_pool/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Route(str, Enum):
    """Фиксированные направления поездок."""
    VIT_TO_KATPADI = "vit-to-katpadi"
    KATPADI_TO_VIT = "katpadi-to-vit"
    VIT_TO_CHENNAI = "vit-to-chennai"
    CHENNAI_TO_VIT = "chennai-to-vit"

    @property
    def is_airport(self) -> bool:
        """Маршрут до/из аэропорта Ченнаи."""
        return self in (Route.VIT_TO_CHENNAI, Route.CHENNAI_TO_VIT)


class VehicleType(str, Enum):
    """Тип транспорта."""
    AUTO = "auto"
    CAB = "cab"


class Gender(str, Enum):
    """Пол пользователя."""
    MALE = "male"
    FEMALE = "female"


class GenderPreference(str, Enum):
    """Предпочтение по составу группы."""
    BOYS = "boys"
    GIRLS = "girls"
    MIXED = "mixed"


class RequestStatus(str, Enum):
    """Статусы заявки на поездку."""
    ACTIVE = "active"
    MATCHED = "matched"
    EXPIRED = "expired"


class GroupStatus(str, Enum):
    """Статусы группы поездки."""
    FORMING = "forming"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class GroupRequestType(str, Enum):
    """Тип запроса на объединение."""
    JOIN_GROUP = "join_group"
    DIRECT_REQUEST = "direct_request"


class GroupRequestStatus(str, Enum):
    """Статусы запроса на объединение."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# =============================================================================
# ПАРАМЕТРЫ СОВМЕСТИМОСТИ
# =============================================================================

# Максимальная разница во времени отправления (минуты)
MAX_TIME_DIFFERENCE_MINUTES = 15

# Веса оценки совместимости
ROUTE_SCORE = 50
DATE_SCORE = 30
TIME_SCORE_BASE = 30
VEHICLE_SCORE = 15
GROUP_SIZE_SCORE = 10
GENDER_SCORE = 10

# Размер группы
MIN_GROUP_MEMBERS = 2
MAX_GROUP_SIZE = 4
