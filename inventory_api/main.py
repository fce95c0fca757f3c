# Inventory API application



import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from inventory_api.database import engine, Base
from inventory_api.core.config import settings
from inventory_api.core.exceptions import InventoryError
from inventory_api.core.immutability import register_immutability_listeners
from inventory_api.core.rate_limiter import limiter
from inventory_api.models import products, stock_alerts, stock_movements, users  # noqa: F401
from inventory_api.routers import (
    auth,
    products as products_router,
    inventory,
    internal_admin,
)


# LOGGING

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger("inventory_api")


# DATABASE

register_immutability_listeners()

if settings.ENV == "development":
    # Production schemas are managed by Alembic
    Base.metadata.create_all(bind=engine)


app = FastAPI(
    title="Inventory API",
    description="Stock tracking with an append-only movement ledger and low stock alerts",
    version="1.0.0",
)


# CORS (bearer tokens, no cookies)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "X-Internal-Secret"],
)


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# DOMAIN ERRORS -> HTTP

@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    logger.info(
        f"{request.method} {request.url.path} rejected: {exc.code} {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()

    response = await call_next(request)

    elapsed_ms = (time.perf_counter() - started) * 1000
    level = logging.WARNING if response.status_code >= 500 else logging.INFO

    logger.log(
        level,
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({elapsed_ms:.1f}ms)",
    )

    return response


for module in (auth, products_router, inventory, internal_admin):
    app.include_router(module.router)


@app.get("/")
def root():
    return {"message": "Inventory API is running", "env": settings.ENV}
