"""
Домен заявок на поездку.
"""

from travel_pool.core.requests.models import TravelRequest, TravelRequestCreateDTO

__all__ = [
    "TravelRequest",
    "TravelRequestCreateDTO",
]
