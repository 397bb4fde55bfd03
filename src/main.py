"""
Production FastAPI Application

Concert NFT ticketing API with the seat channel and the lock expiry monitor.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine
from src.platform.logging.loguru_io import Logger
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.ticketing.driven_adapter import model  # noqa: F401  registers tables


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Concert Tickets] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Concert Tickets] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️  [Concert Tickets] Database tables ready')

    if settings.SEAT_LOCK_BACKEND == 'kvrocks':
        # fail-fast
        await kvrocks_client.initialize()
        Logger.base.info('📡 [Concert Tickets] Kvrocks initialized')

    async with anyio.create_task_group() as tg:
        await container.lock_expiry_monitor().start(task_group=tg)
        Logger.base.info('✅ [Concert Tickets] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Concert Tickets] Shutting down...')
        tg.cancel_scope.cancel()

    await dispose_engine()
    Logger.base.info('🗄️  [Concert Tickets] Database engine disposed')

    if kvrocks_client.is_initialized:
        await kvrocks_client.disconnect()
        Logger.base.info('📡 [Concert Tickets] Kvrocks disconnected')

    container.unwire()

    Logger.base.info('👋 [Concert Tickets] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
