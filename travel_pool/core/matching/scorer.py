# travel_pool/core/matching/scorer.py
"""
Оценка совместимости двух заявок на поездку.

Жёсткие фильтры проверяются строго по порядку: маршрут, дата,
разница во времени, предпочтение по составу. Первый же провал
даёт Incompatible. Иначе набранные баллы и причины возвращаются в Scored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from travel_pool.common.constants import (
    DATE_SCORE,
    GENDER_SCORE,
    GROUP_SIZE_SCORE,
    MAX_TIME_DIFFERENCE_MINUTES,
    ROUTE_SCORE,
    TIME_SCORE_BASE,
    VEHICLE_SCORE,
    GenderPreference,
)
from travel_pool.core.requests.models import TravelRequest


@dataclass(frozen=True)
class Incompatible:
    """Заявки несовместимы."""

    score: int = 0
    reasons: tuple[str, ...] = ()

    @property
    def is_compatible(self) -> bool:
        return False


@dataclass(frozen=True)
class Scored:
    """Заявки совместимы: итоговый балл и причины в порядке проверки."""

    score: int
    reasons: tuple[str, ...]

    @property
    def is_compatible(self) -> bool:
        return True


MatchResult = Union[Incompatible, Scored]

INCOMPATIBLE = Incompatible()


def time_difference_minutes(first: TravelRequest, second: TravelRequest) -> float:
    """Абсолютная разница времени отправления в минутах (дата не учитывается)."""
    first_seconds = first.time.hour * 3600 + first.time.minute * 60 + first.time.second
    second_seconds = second.time.hour * 3600 + second.time.minute * 60 + second.time.second
    return abs(first_seconds - second_seconds) / 60


def check_gender_compatibility(
    first: GenderPreference,
    second: GenderPreference,
) -> tuple[bool, str]:
    """
    Сравнивает заявленные предпочтения, а не фактический пол пользователей.

    Returns:
        (совместимы ли, причина)
    """
    if first == GenderPreference.MIXED or second == GenderPreference.MIXED:
        return True, "Mixed group preference"

    if first == second:
        return True, f"Both prefer {first.value} groups"

    return False, "Gender preference mismatch"


def are_loosely_compatible(first: TravelRequest, second: TravelRequest) -> bool:
    """Совпадают маршрут и дата, время отличается не более чем на 15 минут."""
    return (
        first.route == second.route
        and first.date == second.date
        and time_difference_minutes(first, second) <= MAX_TIME_DIFFERENCE_MINUTES
    )


def score_requests(reference: TravelRequest, candidate: TravelRequest) -> MatchResult:
    """
    Считает совместимость заявки-кандидата с опорной заявкой.

    Args:
        reference: Заявка, для которой ищутся попутчики
        candidate: Заявка-кандидат

    Returns:
        Scored с баллом и причинами или Incompatible
    """
    score = 0
    reasons: list[str] = []

    if reference.route != candidate.route:
        return INCOMPATIBLE
    score += ROUTE_SCORE
    reasons.append("Same route")

    if reference.date != candidate.date:
        return INCOMPATIBLE
    score += DATE_SCORE
    reasons.append("Same date")

    minutes = time_difference_minutes(reference, candidate)
    if minutes > MAX_TIME_DIFFERENCE_MINUTES:
        return INCOMPATIBLE
    whole_minutes = math.floor(minutes)
    score += TIME_SCORE_BASE - whole_minutes
    reasons.append(f"Time difference: {whole_minutes} minutes")

    if reference.vehicle_type == candidate.vehicle_type:
        score += VEHICLE_SCORE
        reasons.append("Same vehicle type")

    if reference.group_size == candidate.group_size:
        score += GROUP_SIZE_SCORE
        reasons.append("Same group size preference")

    compatible, reason = check_gender_compatibility(
        reference.gender_preference,
        candidate.gender_preference,
    )
    if not compatible:
        return INCOMPATIBLE
    score += GENDER_SCORE
    reasons.append(reason)

    return Scored(score=score, reasons=tuple(reasons))


def compatible_group_size(first: TravelRequest, second: TravelRequest) -> int:
    """Размер группы, устраивающий обе заявки."""
    return min(first.group_size, second.group_size)


def can_merge_requests(
    first: TravelRequest,
    second: TravelRequest,
    threshold: int | None = None,
) -> bool:
    """
    Достаточно ли высок балл для автоматического объединения заявок.

    Args:
        first: Первая заявка
        second: Вторая заявка
        threshold: Порог (строго больше); из конфига, если None
    """
    if threshold is None:
        from travel_pool.config import settings
        threshold = settings.matching.MERGE_SCORE_THRESHOLD

    result = score_requests(first, second)
    return result.is_compatible and result.score > threshold
