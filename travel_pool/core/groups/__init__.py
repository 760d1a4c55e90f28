"""
Домен групп поездок.
"""

from travel_pool.core.groups.models import ChatMessage, TravelGroup

__all__ = [
    "ChatMessage",
    "TravelGroup",
]
