"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from jobboard_service.app.exception_handlers import configure_exception_handlers
from jobboard_service.app.lifespan import lifespan
from jobboard_service.app.middleware import (
    HttpCacheMiddleware,
    IdentityMiddleware,
    MetricsMiddleware,
    RequestIDMiddleware,
)
from jobboard_service.app.router import setup_routers
from jobboard_service.core.settings import get_app_settings, get_http_cache_settings


def configure_middleware(app: FastAPI) -> None:
    """Install middleware; the last one added runs first.

    Request order: metrics -> request id -> identity -> response cache, so
    the response cache sees ``request.state.user_id`` when it builds keys.
    """
    app.add_middleware(HttpCacheMiddleware, settings=get_http_cache_settings())
    app.add_middleware(IdentityMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(MetricsMiddleware)


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()
    show_docs = not (app_settings.disable_docs or app_settings.is_production)

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.docs_url if show_docs else None,
        redoc_url=None,
        openapi_url=app_settings.openapi_url if show_docs else None,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    # Until the lifespan connects Redis the response cache passes through
    app.state.cache_store = None

    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app)

    return app


# Application instance for uvicorn
app = create_app()
