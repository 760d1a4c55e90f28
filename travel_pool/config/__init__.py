"""
Модуль конфигурации.
Экспортирует настройки приложения.
"""

from travel_pool.config.loader import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
