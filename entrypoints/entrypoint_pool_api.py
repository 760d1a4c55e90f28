#!/usr/bin/env python3
# entrypoint_pool_api.py
"""
Точка входа для Pool API.
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from travel_pool.config import settings
from travel_pool.common.logger import log_info, setup_logging
from travel_pool.common.constants import TypeMsg


async def main() -> None:
    """Запуск Pool API."""
    setup_logging()
    await log_info(
        f"Запуск Pool API на порту {settings.deployment.POOL_API_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "travel_pool.services.pool_api.app:app",
        host=settings.deployment.POOL_API_HOST,
        port=settings.deployment.POOL_API_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
