# tests/core/test_scorer.py
"""
Тесты для оценки совместимости заявок.
"""

from __future__ import annotations

from datetime import date, time
from typing import Callable

import pytest

from travel_pool.common.constants import GenderPreference, Route, VehicleType
from travel_pool.core.matching.scorer import (
    INCOMPATIBLE,
    Incompatible,
    Scored,
    are_loosely_compatible,
    can_merge_requests,
    check_gender_compatibility,
    compatible_group_size,
    score_requests,
    time_difference_minutes,
)
from travel_pool.core.requests.models import TravelRequest

RequestFactory = Callable[..., TravelRequest]


class TestScoreRequests:
    """Тесты для score_requests."""

    def test_full_match_with_ten_minute_gap(self, make_request: RequestFactory) -> None:
        """Проверяет балл 135 при разнице в 10 минут и совпадении всех атрибутов."""
        first = make_request(user_id="u1")
        second = make_request(user_id="u2", time=time(9, 10))

        result = score_requests(first, second)

        assert isinstance(result, Scored)
        assert result.score == 135
        assert result.reasons == (
            "Same route",
            "Same date",
            "Time difference: 10 minutes",
            "Same vehicle type",
            "Same group size preference",
            "Mixed group preference",
        )

    def test_identical_requests_score_maximum(self, make_request: RequestFactory) -> None:
        """Проверяет максимальный балл 145 для одинаковых заявок."""
        result = score_requests(make_request(user_id="u1"), make_request(user_id="u2"))

        assert result.score == 145
        assert "Time difference: 0 minutes" in result.reasons

    def test_twenty_minute_gap_is_incompatible(self, make_request: RequestFactory) -> None:
        """Проверяет, что разница в 20 минут даёт Incompatible."""
        result = score_requests(make_request(), make_request(time=time(9, 20)))

        assert isinstance(result, Incompatible)
        assert result.score == 0
        assert not result.is_compatible

    def test_exactly_fifteen_minutes_is_compatible(self, make_request: RequestFactory) -> None:
        """Проверяет границу в 15 минут включительно."""
        result = score_requests(make_request(), make_request(time=time(9, 15)))

        assert isinstance(result, Scored)
        assert result.score == 50 + 30 + 15 + 15 + 10 + 10

    def test_boys_and_girls_are_incompatible(self, make_request: RequestFactory) -> None:
        """Проверяет несовместимость предпочтений boys и girls."""
        first = make_request(gender_preference=GenderPreference.BOYS)
        second = make_request(gender_preference=GenderPreference.GIRLS)

        assert score_requests(first, second) is INCOMPATIBLE

    def test_different_route_is_incompatible(self, make_request: RequestFactory) -> None:
        """Проверяет отсев по маршруту."""
        second = make_request(route=Route.KATPADI_TO_VIT)
        assert score_requests(make_request(), second) is INCOMPATIBLE

    def test_different_date_is_incompatible(self, make_request: RequestFactory) -> None:
        """Проверяет отсев по дате."""
        second = make_request(date=date(2024, 1, 11))
        assert score_requests(make_request(), second) is INCOMPATIBLE

    def test_soft_attributes_only_lower_score(self, make_request: RequestFactory) -> None:
        """Проверяет, что транспорт и размер группы не отсеивают заявку."""
        second = make_request(vehicle_type=VehicleType.CAB, group_size=4)

        result = score_requests(make_request(), second)

        assert isinstance(result, Scored)
        assert result.score == 50 + 30 + 30 + 10
        assert "Same vehicle type" not in result.reasons
        assert "Same group size preference" not in result.reasons

    def test_fractional_minutes_are_floored(self, make_request: RequestFactory) -> None:
        """Проверяет округление разницы во времени вниз."""
        second = make_request(time=time(9, 4, 50))

        result = score_requests(make_request(), second)

        assert result.score == 50 + 30 + 26 + 15 + 10 + 10
        assert "Time difference: 4 minutes" in result.reasons

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            (GenderPreference.MIXED, GenderPreference.BOYS),
            (GenderPreference.GIRLS, GenderPreference.GIRLS),
            (GenderPreference.BOYS, GenderPreference.GIRLS),
        ],
    )
    def test_score_is_symmetric(
        self,
        make_request: RequestFactory,
        first: GenderPreference,
        second: GenderPreference,
    ) -> None:
        """Проверяет, что балл не зависит от порядка аргументов."""
        a = make_request(gender_preference=first, time=time(9, 7), group_size=3)
        b = make_request(gender_preference=second, vehicle_type=VehicleType.CAB)

        assert score_requests(a, b).score == score_requests(b, a).score


class TestGenderCompatibility:
    """Тесты для check_gender_compatibility."""

    def test_mixed_accepts_anyone(self) -> None:
        assert check_gender_compatibility(GenderPreference.MIXED, GenderPreference.GIRLS) == (
            True,
            "Mixed group preference",
        )

    def test_same_preference(self) -> None:
        """Проверяет причину для одинакового предпочтения."""
        compatible, reason = check_gender_compatibility(GenderPreference.GIRLS, GenderPreference.GIRLS)

        assert compatible
        assert reason == "Both prefer girls groups"

    def test_mismatch(self) -> None:
        compatible, _ = check_gender_compatibility(GenderPreference.BOYS, GenderPreference.GIRLS)
        assert not compatible


class TestHelpers:
    """Тесты для вспомогательных функций."""

    def test_time_difference_ignores_date(self, make_request: RequestFactory) -> None:
        """Проверяет, что разница считается только по времени суток."""
        first = make_request(time=time(23, 50))
        second = make_request(time=time(0, 5), date=date(2024, 1, 11))

        assert time_difference_minutes(first, second) == 23 * 60 + 45

    def test_loose_compatibility_ignores_gender(self, make_request: RequestFactory) -> None:
        """Проверяет, что упрощённая проверка не учитывает пол и транспорт."""
        first = make_request(gender_preference=GenderPreference.BOYS)
        second = make_request(
            gender_preference=GenderPreference.GIRLS,
            vehicle_type=VehicleType.CAB,
            time=time(9, 15),
        )

        assert are_loosely_compatible(first, second)
        assert not are_loosely_compatible(first, make_request(time=time(9, 16)))

    def test_compatible_group_size(self, make_request: RequestFactory) -> None:
        assert compatible_group_size(make_request(group_size=4), make_request(group_size=3)) == 3

    def test_can_merge_requests_threshold(self, make_request: RequestFactory) -> None:
        """Проверяет порог автоматического объединения."""
        first = make_request()
        second = make_request(time=time(9, 10))

        assert can_merge_requests(first, second, threshold=70)
        assert not can_merge_requests(first, second, threshold=135)
        assert not can_merge_requests(first, make_request(time=time(10, 0)), threshold=0)
