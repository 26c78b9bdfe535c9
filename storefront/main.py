# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supabase import AsyncClient

from storefront.core.config import get_settings
from storefront.core.errors import RemoteError
from storefront.core.supabase_client import supabase_public
from storefront.dependencies import Storefront

# Routers
from storefront.routers.addresses import router as addresses_router
from storefront.routers.auth import router as auth_router
from storefront.routers.cart import router as cart_router
from storefront.routers.categories import router as categories_router
from storefront.routers.notifications import router as notifications_router
from storefront.routers.orders import router as orders_router
from storefront.routers.products import router as products_router
from storefront.routers.profile import router as profile_router
from storefront.routers.reviews import router as reviews_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


def remote_error_status(error: RemoteError) -> int:
    if error.is_no_rows:
        return status.HTTP_404_NOT_FOUND
    if error.is_rls_violation:
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_502_BAD_GATEWAY


async def remote_error_handler(request: Request, exc: RemoteError) -> JSONResponse:
    return JSONResponse(
        status_code=remote_error_status(exc),
        content={"detail": exc.to_dict()},
    )


def create_app(supabase: AsyncClient | None = None) -> FastAPI:
    """
    Build the storefront application.

    Args:
        supabase: client to use instead of creating one from settings
            (tests pass a fake here).

    Raises:
        pydantic.ValidationError: if SUPABASE_URL / SUPABASE_KEY are missing.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Create the Supabase client and the shopper state.
          - Subscribe to session changes and restore a persisted session.

        Shutdown:
          - Unsubscribe and let pending profile checks finish.
        """
        client = supabase
        if client is None:
            logger.info("🔄 Startup: Connecting to Supabase at %s", settings.SUPABASE_URL)
            client = await supabase_public(settings)

        store = Storefront.build(client, settings)
        app.state.store = store

        store.auth.subscribe()
        session = await store.auth.restore_session()
        if session:
            logger.info("✅ Startup: restored session for %s", session.user_id)
        else:
            logger.info("✅ Startup: no session, browsing as guest")

        yield

        await store.auth.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RemoteError, remote_error_handler)

    # Versioned API prefix, e.g. /api/v1
    for router in (
        products_router,
        categories_router,
        cart_router,
        auth_router,
        profile_router,
        orders_router,
        addresses_router,
        reviews_router,
        notifications_router,
    ):
        app.include_router(router, prefix=settings.API_V1_STR)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "storefront"}

    return app


# uvicorn storefront.main:app
app = create_app()
