# travel_pool/core/matching/service.py
"""
Сервис поиска попутчиков.
Отбирает кандидатов среди активных заявок и ранжирует их по баллу совместимости.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from typing import Iterator, Optional

from travel_pool.common.logger import get_logger
from travel_pool.core.groups.models import TravelGroup
from travel_pool.core.matching.scorer import Scored, score_requests
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.users.models import User
from travel_pool.infra.record_store import RecordStore

logger = get_logger("matching")


@dataclass(frozen=True)
class MatchCandidate:
    """Кандидат в попутчики."""
    request: TravelRequest
    score: int
    reasons: tuple[str, ...]
    user: Optional[User] = None


class MatchCandidates:
    """
    Ранжированные кандидаты для одной заявки.

    Вычисляются при каждой итерации заново по текущему состоянию хранилища,
    поэтому последовательность можно обходить повторно.
    """

    def __init__(self, service: MatchingService, reference: TravelRequest) -> None:
        self._service = service
        self._reference = reference

    def __iter__(self) -> Iterator[MatchCandidate]:
        return iter(self._service.rank(self._reference))

    def top(self, limit: int | None = None) -> list[MatchCandidate]:
        """
        Первые limit кандидатов.

        Args:
            limit: Количество (из конфига, если None)
        """
        if limit is None:
            from travel_pool.config import settings
            limit = settings.matching.TOP_MATCHES
        return list(islice(self, limit))


class MatchingService:
    """
    Сервис матчинга заявок на поездку.

    Это жадный поиск для одной заявки, а не глобальная оптимизация.
    """

    def __init__(self, store: RecordStore) -> None:
        """
        Args:
            store: Хранилище записей
        """
        self._store = store

    def find_matches(self, reference: TravelRequest) -> MatchCandidates:
        """
        Возвращает кандидатов для заявки.

        Args:
            reference: Заявка, для которой ищутся попутчики

        Returns:
            Ленивая повторно обходимая последовательность кандидатов
        """
        return MatchCandidates(self, reference)

    def find_matches_for_request(self, request_id: str) -> Optional[MatchCandidates]:
        """Кандидаты для заявки по ID. None, если заявки нет."""
        reference = self._store.travel_requests.get(request_id)
        if reference is None:
            return None
        return self.find_matches(reference)

    def rank(self, reference: TravelRequest) -> list[MatchCandidate]:
        """
        Отбирает и сортирует кандидатов.

        Порядок при равных баллах совпадает с порядком заявок в хранилище.
        """
        groups = self._store.travel_groups.list()
        users = {user.id: user for user in self._store.users.list()}

        matches: list[MatchCandidate] = []

        for candidate in self._store.travel_requests.list():
            if not self._is_eligible(reference, candidate, groups):
                continue

            result = score_requests(reference, candidate)
            if not isinstance(result, Scored) or result.score <= 0:
                continue

            matches.append(MatchCandidate(
                request=candidate,
                score=result.score,
                reasons=result.reasons,
                user=users.get(candidate.user_id),
            ))

        # sorted() стабилен: равные баллы сохраняют исходный порядок
        ranked = sorted(matches, key=lambda match: match.score, reverse=True)

        logger.debug(
            f"Заявка {reference.id}: найдено {len(ranked)} кандидатов",
        )

        return ranked

    def _is_eligible(
        self,
        reference: TravelRequest,
        candidate: TravelRequest,
        groups: list[TravelGroup],
    ) -> bool:
        """Проверяет, может ли заявка быть кандидатом."""
        if candidate.user_id == reference.user_id:
            return False

        if not candidate.is_active:
            return False

        owner_group = next(
            (group for group in groups if group.is_active and group.has_member(candidate.user_id)),
            None,
        )

        if owner_group is None:
            return True

        # Вместимость сравнивается с желаемым размером из заявки кандидата
        if len(owner_group.members) >= candidate.group_size:
            return False

        if owner_group.is_fully_confirmed:
            return False

        return True
