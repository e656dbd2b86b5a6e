"""GameVault FastAPI application.

Storefront API for digital and physical games: accounts, catalogue, cart,
orders, coupons, Mercado Pago checkout and transactional mail. Each request
is wrapped in the Protean domain context that owns its URL prefix.

Usage:
    uvicorn app:create_app --factory --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine, text

from catalogue.api import category_router, product_router
from catalogue.domain import catalogue
from files.api import files_router
from files.domain import files
from files.storage import StorageError
from identity.api import auth_router, user_router
from identity.domain import identity
from notifications.api import mail_router
from notifications.channel import reset_channels
from notifications.domain import notifications
from ordering.api import cart_router, coupon_router, order_router
from ordering.domain import ordering
from payments.api import mercadopago_router
from payments.gateway.port import GatewayError
from shared.api import domain_context_middleware, register_exception_handlers, request_context_middleware
from shared.config import Settings, get_settings
from shared.domain import init_domain
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

DOMAINS = (identity, catalogue, files, ordering, notifications)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
ROUTE_DOMAINS = {
    "/auth": identity,
    "/users": identity,
    "/products": catalogue,
    "/categories": catalogue,
    "/files": files,
    "/cart": ordering,
    "/orders": ordering,
    "/coupons": ordering,
    # Checkout places orders; the webhook enters the ordering context itself
    "/mercadopago": ordering,
    "/mail": notifications,
}


def init_domains(settings: Settings | None = None) -> None:
    for domain in DOMAINS:
        init_domain(domain, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("GameVault API starting")
    yield
    reset_channels()
    logger.info("GameVault API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging()
    init_domains(settings)

    app = FastAPI(
        title="GameVault API",
        description="Game store backend: identity, catalogue, ordering, payments and mail",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(domain_context_middleware(ROUTE_DOMAINS))
    app.middleware("http")(request_context_middleware)
    register_exception_handlers(app, upstream_errors=(StorageError, GatewayError))

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(files_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(coupon_router)
    app.include_router(mercadopago_router)
    app.include_router(mail_router)

    @app.get("/health")
    def health():
        engine = create_engine(settings.database_url)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("Health check failed", error=str(exc))
            return JSONResponse(status_code=503, content={"status": "unavailable", "database": "down"})
        finally:
            engine.dispose()
        return {
            "status": "ok",
            "environment": settings.gamevault_env,
            "database": "up",
            "domains": [domain.name for domain in DOMAINS],
        }

    return app
