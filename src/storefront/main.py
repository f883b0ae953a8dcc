import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as PydanticValidationError

from storefront.api.v1 import admin, cart, orders, products, uploads, users
from storefront.core.config import settings
from storefront.core.database import engine
from storefront.core.exceptions import PersistenceError, StorefrontError
from storefront.core.redis import close_redis
from storefront.middleware.metrics import PrometheusMiddleware, metrics_endpoint
from storefront.schemas.base import format_validation_error

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting storefront API...")

    yield

    logger.info("Shutting down: closing Redis and database pools")
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="Storefront",
    version="1.0.0",
    description="Storefront catalog, cart and order API",
    lifespan=lifespan,
)

# Prometheus Metrics Middleware (must be first to capture all requests)
app.add_middleware(PrometheusMiddleware)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cart-Id"],
)


# =============================================================================
# Error handlers
# =============================================================================


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if isinstance(exc, PersistenceError):
        # Details were logged where the failure happened
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "An unexpected error occurred"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed requests are validation errors: 400 rather than FastAPI's 422."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{field}: {message}" if field else message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_error_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": format_validation_error(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred"},
    )


# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["cart"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["orders"])
app.include_router(uploads.router, prefix="/api/v1/uploads", tags=["uploads"])
app.include_router(users.router, prefix="/api/v1", tags=["users"])

# Uploaded product images
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Prometheus metrics endpoint
app.add_route("/metrics", metrics_endpoint)
