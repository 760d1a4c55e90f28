# travel_pool/core/state_machine.py
"""
Допустимые переходы статусов заявок, групп и запросов на объединение.
Все переходы однонаправленные, терминальные статусы не имеют выходов.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from travel_pool.common.constants import GroupRequestStatus, GroupStatus, RequestStatus


class StateMachine:
    ALLOWED_TRANSITIONS: ClassVar[dict[Enum, list[Enum]]] = {}

    @classmethod
    def can_transition(cls, current_status: Enum, new_status: Enum) -> bool:
        return new_status in cls.ALLOWED_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_terminal(cls, status: Enum) -> bool:
        return not cls.ALLOWED_TRANSITIONS.get(status)


class RequestStateMachine(StateMachine):
    ALLOWED_TRANSITIONS = {
        RequestStatus.ACTIVE: [RequestStatus.MATCHED, RequestStatus.EXPIRED],
        RequestStatus.MATCHED: [],
        RequestStatus.EXPIRED: [],
    }


class GroupStateMachine(StateMachine):
    ALLOWED_TRANSITIONS = {
        GroupStatus.FORMING: [GroupStatus.CONFIRMED, GroupStatus.COMPLETED],
        GroupStatus.CONFIRMED: [GroupStatus.COMPLETED],
        GroupStatus.COMPLETED: [],
    }


class GroupRequestStateMachine(StateMachine):
    ALLOWED_TRANSITIONS = {
        GroupRequestStatus.PENDING: [GroupRequestStatus.ACCEPTED, GroupRequestStatus.REJECTED],
        GroupRequestStatus.ACCEPTED: [],
        GroupRequestStatus.REJECTED: [],
    }
