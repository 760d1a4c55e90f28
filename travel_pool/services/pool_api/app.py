# travel_pool/services/pool_api/app.py
"""
FastAPI приложение сервиса подбора попутчиков.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from travel_pool.common.constants import TypeMsg
from travel_pool.common.logger import log_info, setup_logging
from travel_pool.config import settings
from travel_pool.core.bootstrap import initialize_storage
from travel_pool.infra.record_store import RecordStore, build_record_store
from travel_pool.services.pool_api.routes import groups_router, handshakes_router, requests_router


def create_app(store: RecordStore | None = None, initialize: bool = True) -> FastAPI:
    """
    Создаёт приложение.

    Args:
        store: Готовое хранилище (если None, создаётся по конфигу при старте)
        initialize: Очищать ли просроченные заявки и группы при старте
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            app.state.store = build_record_store(settings)
        if initialize:
            removed_requests, removed_groups = initialize_storage(app.state.store)
            await log_info(
                f"Очистка при старте: заявок {removed_requests}, групп {removed_groups}",
                type_msg=TypeMsg.DEBUG,
            )
        await log_info("Pool API запущен", type_msg=TypeMsg.INFO)
        yield
        if owns_store:
            app.state.store.close()
            app.state.store = None
        await log_info("Pool API остановлен", type_msg=TypeMsg.INFO)

    app = FastAPI(
        title="Travel Pool API",
        version=settings.system.VERSION,
        lifespan=lifespan,
    )
    app.state.store = store

    app.include_router(requests_router, prefix="/api/v1")
    app.include_router(handshakes_router, prefix="/api/v1")
    app.include_router(groups_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "pool_api"}

    return app


app = create_app()
