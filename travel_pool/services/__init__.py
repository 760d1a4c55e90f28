"""
Сервисы приложения (HTTP).
"""
