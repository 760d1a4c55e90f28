# travel_pool/core/groups/service.py
"""
Сервис групп поездок.
Создание, подтверждение, изменение состава, слияние и удаление групп, чат.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from travel_pool.common.constants import MIN_GROUP_MEMBERS, GroupStatus
from travel_pool.common.logger import get_logger
from travel_pool.core.groups.models import ChatMessage, TravelGroup
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.state_machine import GroupStateMachine
from travel_pool.core.users.models import UNKNOWN_USER_NAME
from travel_pool.infra.record_store import RecordStore

logger = get_logger("groups")


class GroupService:
    """
    Сервис групп.

    Группа существует, пока в ней минимум два участника: при выходе
    предпоследнего участника группа удаляется вместе с чатом.
    """

    def __init__(
        self,
        store: RecordStore,
        max_group_size: int | None = None,
        retention_days: int | None = None,
    ) -> None:
        """
        Args:
            store: Хранилище записей
            max_group_size: Максимум участников при подборе группы для слияния
            retention_days: Сколько дней хранить группы после даты поездки
        """
        from travel_pool.config import settings

        self._store = store
        self._max_group_size = (
            max_group_size if max_group_size is not None else settings.lifecycle.MAX_GROUP_SIZE
        )
        self._retention = timedelta(
            days=retention_days if retention_days is not None else settings.lifecycle.GROUP_RETENTION_DAYS,
        )

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    def get_group(self, group_id: str) -> Optional[TravelGroup]:
        return self._store.travel_groups.get(group_id)

    def list_groups(self, include_completed: bool = True) -> list[TravelGroup]:
        return [
            group
            for group in self._store.travel_groups.list()
            if include_completed or group.is_active
        ]

    def list_for_user(self, user_id: str, include_completed: bool = False) -> list[TravelGroup]:
        """Группы, в которых состоит пользователь."""
        return [
            group
            for group in self.list_groups(include_completed=include_completed)
            if group.has_member(user_id)
        ]

    def active_group_for_user(self, user_id: str) -> Optional[TravelGroup]:
        """Первая незавершённая группа пользователя."""
        return next(iter(self.list_for_user(user_id)), None)

    def active_group_for_user_on_date(self, user_id: str, travel_date: date) -> Optional[TravelGroup]:
        """Незавершённая группа пользователя на указанную дату."""
        return next(
            (group for group in self.list_for_user(user_id) if group.date == travel_date),
            None,
        )

    def merge_targets(self, group_id: str, user_id: str) -> list[TravelGroup]:
        """
        Группы, с которыми можно слить указанную.

        Тот же маршрут, дата и тип транспорта, статус forming,
        пользователь в ней не состоит, суммарный состав не превышает максимум.
        """
        current = self.get_group(group_id)
        if current is None:
            return []

        return [
            group
            for group in self._store.travel_groups.list()
            if group.id != current.id
            and group.route == current.route
            and group.date == current.date
            and group.vehicle_type == current.vehicle_type
            and group.status == GroupStatus.FORMING
            and not group.has_member(user_id)
            and len(group.members) + len(current.members) <= self._max_group_size
        ]

    # =========================================================================
    # ЖИЗНЕННЫЙ ЦИКЛ
    # =========================================================================

    def create(self, member_ids: Sequence[str], snapshot: TravelRequest) -> TravelGroup:
        """
        Создаёт группу в статусе forming.

        Args:
            member_ids: Два участника
            snapshot: Заявка, из которой копируются маршрут, дата, время и транспорт

        Returns:
            Созданная группа
        """
        members = list(dict.fromkeys(member_ids))

        group = TravelGroup(
            request_id=snapshot.id,
            members=members,
            route=snapshot.route,
            date=snapshot.date,
            time=snapshot.time,
            vehicle_type=snapshot.vehicle_type,
            status=GroupStatus.FORMING,
            chat_messages=[],
        )
        self._store.travel_groups.put(group)

        logger.info(f"Группа {group.id} создана: {', '.join(members)}")

        return group

    def confirm(self, group_id: str) -> Optional[TravelGroup]:
        """
        Подтверждает группу (forming → confirmed).
        Подтверждать может любой участник, кворум не нужен.
        Для уже подтверждённой группы ничего не меняет.
        """
        group = self.get_group(group_id)
        if group is None:
            return None

        if group.status == GroupStatus.CONFIRMED:
            return group

        if not GroupStateMachine.can_transition(group.status, GroupStatus.CONFIRMED):
            logger.warning(f"Группа {group_id} в статусе {group.status.value} не может быть подтверждена")
            return group

        group.status = GroupStatus.CONFIRMED
        self._store.travel_groups.put(group)

        logger.info(f"Группа {group_id} подтверждена")

        return group

    def confirm_member(self, group_id: str, user_id: str) -> Optional[TravelGroup]:
        """Отмечает, что участник подтвердил поездку."""
        group = self.get_group(group_id)
        if group is None:
            return None

        if group.has_member(user_id) and user_id not in group.confirmed_members:
            group.confirmed_members.append(user_id)
            self._store.travel_groups.put(group)

        return group

    def add_member(self, group_id: str, user_id: str) -> Optional[TravelGroup]:
        """Добавляет участника, если его ещё нет в группе."""
        group = self.get_group(group_id)
        if group is None:
            return None

        if not group.has_member(user_id):
            group.members.append(user_id)
            self._store.travel_groups.put(group)
            logger.info(f"Пользователь {user_id} добавлен в группу {group_id}")

        return group

    def remove_member(self, group_id: str, user_id: str) -> Optional[TravelGroup]:
        """
        Исключает участника.

        Returns:
            Группа с новым составом или None, если группы нет
            либо она удалена из-за нехватки участников
        """
        group = self.get_group(group_id)
        if group is None:
            return None

        if not group.has_member(user_id):
            return group

        group.members = [member for member in group.members if member != user_id]

        if len(group.members) < MIN_GROUP_MEMBERS:
            self._store.travel_groups.remove(group_id)
            logger.info(f"Группа {group_id} удалена: участников меньше {MIN_GROUP_MEMBERS}")
            return None

        self._store.travel_groups.put(group)
        logger.info(f"Пользователь {user_id} покинул группу {group_id}")

        return group

    def merge(self, source_group_id: str, target_group_id: str) -> Optional[TravelGroup]:
        """
        Сливает группу-источник в целевую.

        Состав цели: её участники, затем новые участники источника.
        Чат цели: её сообщения, затем сообщения источника, без сортировки по времени.
        Источник получает статус completed, остальные его поля не меняются.
        Вместимость и совпадение маршрута здесь не проверяются,
        цель подбирается заранее через merge_targets().

        Returns:
            Обновлённая целевая группа или None, если одной из групп нет
        """
        if source_group_id == target_group_id:
            return None

        source = self.get_group(source_group_id)
        target = self.get_group(target_group_id)

        if source is None or target is None:
            return None

        target.members = list(dict.fromkeys([*target.members, *source.members]))
        target.chat_messages = [*target.chat_messages, *source.chat_messages]
        self._store.travel_groups.put(target)

        source.status = GroupStatus.COMPLETED
        self._store.travel_groups.put(source)

        logger.info(f"Группа {source_group_id} слита в {target_group_id}")

        return target

    def delete(self, group_id: str) -> bool:
        """
        Удаляет группу и запросы на объединение, ссылающиеся на неё по ID группы.
        Запросы без ссылки на группу не затрагиваются.
        """
        removed = self._store.travel_groups.remove(group_id)

        requests = self._store.group_requests.list()
        self._store.group_requests.replace_all(
            [request for request in requests if request.group_id != group_id]
        )

        if removed:
            logger.info(f"Группа {group_id} удалена")

        return removed

    def sweep_old_groups(self, now: datetime | None = None) -> int:
        """
        Удаляет группы, дата поездки которых старше срока хранения.

        Returns:
            Количество удалённых групп
        """
        now = now or datetime.now()
        cutoff = now - self._retention

        groups = self._store.travel_groups.list()
        valid = [group for group in groups if datetime.combine(group.date, time.min) >= cutoff]
        removed = len(groups) - len(valid)

        self._store.travel_groups.replace_all(valid)

        if removed:
            logger.info(f"Удалено устаревших групп: {removed}")

        return removed

    # =========================================================================
    # ЧАТ
    # =========================================================================

    def post_message(self, group_id: str, user_id: str, text: str) -> Optional[ChatMessage]:
        """
        Добавляет сообщение в чат группы.
        Имя автора сохраняется на момент отправки.
        """
        group = self.get_group(group_id)
        if group is None:
            return None

        text = text.strip()
        if not text:
            return None

        author = self._store.users.get(user_id)
        message = ChatMessage(
            user_id=user_id,
            user_name=author.name if author is not None else UNKNOWN_USER_NAME,
            message=text,
        )

        group.chat_messages.append(message)
        self._store.travel_groups.put(group)

        return message

    def messages(self, group_id: str) -> list[ChatMessage]:
        group = self.get_group(group_id)
        if group is None:
            return []
        return group.chat_messages
