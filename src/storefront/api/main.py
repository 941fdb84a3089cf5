"""
FastAPI application entry point for the Storefront API.
"""

# Load environment variables FIRST before any other imports
from pathlib import Path
from dotenv import load_dotenv

project_root = Path(__file__).parent.parent.parent.parent  # src/storefront/api/main.py -> root
env_file = project_root / ".env"
if env_file.exists():
    load_dotenv(env_file)

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__
from storefront.api.middleware import ErrorHandlerMiddleware, register_exception_handlers
from storefront.api.routes import admin, auth, cart, health, orders, products, seller, users
from storefront.cache import reset_cache
from storefront.utils.config import get_settings
from storefront.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

API_PREFIX = "/api/v1"

# (router, prefix, tag)
ROUTES = [
    (auth.router, "/auth", "Authentication"),
    (users.router, "/users", "Users"),
    (products.router, "/products", "Products"),
    (seller.router, "/seller", "Seller"),
    (cart.router, "/cart", "Cart"),
    (orders.router, "/orders", "Orders"),
    (admin.router, "/admin", "Admin"),
    (health.router, "/health", "Health"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    settings = get_settings()
    logger.info(f"Starting Storefront API {__version__}: {settings.summary()}")
    if settings.uses_default_secret:
        logger.warning("SECRET_KEY is the built-in default; tokens can be forged until it is set")

    yield

    logger.info("Shutting down Storefront API...")
    reset_cache()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Storefront API",
        description="Catalog, cart and checkout backend for a multi-seller shop",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for router, prefix, tag in ROUTES:
        app.include_router(router, prefix=API_PREFIX + prefix, tags=[tag])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "storefront.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
