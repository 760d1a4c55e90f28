"""
Домен запросов на объединение в группу.
"""

from travel_pool.core.handshake.models import AcceptOutcome, GroupRequest, GroupRequestCreateDTO

__all__ = [
    "AcceptOutcome",
    "GroupRequest",
    "GroupRequestCreateDTO",
]
