"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.service.seat_lock.driving_adapter.http_controller.seat_lock_controller import (
    router as seat_lock_router,
    system_router,
)
from src.service.seat_lock.driving_adapter.websocket.seat_websocket_controller import (
    router as seat_websocket_router,
)
from src.service.ticketing.driving_adapter.http_controller.admin_controller import (
    router as admin_router,
)
from src.service.ticketing.driving_adapter.http_controller.auth_controller import (
    router as auth_router,
)
from src.service.ticketing.driving_adapter.http_controller.concert_controller import (
    router as concert_router,
)
from src.service.ticketing.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Concert NFT Ticketing API',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix='/api/auth', tags=['auth'])
    app.include_router(concert_router, prefix='/api/concerts', tags=['concert'])
    app.include_router(admin_router, prefix='/api/admin', tags=['admin'])
    # Seat lock routes share /api/tickets and must precede /{ticket_id}
    app.include_router(seat_lock_router, prefix='/api/tickets', tags=['seat-lock'])
    app.include_router(ticket_router, prefix='/api/tickets', tags=['ticket'])
    app.include_router(system_router, prefix='/api/system', tags=['system'])
    app.include_router(seat_websocket_router, tags=['websocket'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/api/health')
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
