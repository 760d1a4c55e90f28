"""
Домен пользователей.
Регистрация и профиль вне ядра, здесь только модель.
"""

from travel_pool.core.users.models import User, UNKNOWN_USER_NAME

__all__ = [
    "User",
    "UNKNOWN_USER_NAME",
]
