from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import create_tables
from shared.config.settings import SERVICE_NAME
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.account_service import models as account_models
from services.product_service import models as product_models
from services.cart_service import models as cart_models
from services.order_service import models as order_models

from services.product_service.router import router as product_router, public_router as product_public_router
from services.cart_service.router import router as cart_router
from services.payment_service.router import router as payment_router
from services.order_service.router import router as order_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("startup_complete", service=SERVICE_NAME)
    yield
    logger.info("shutdown", service=SERVICE_NAME)


app = FastAPI(title="Agrovet Checkout", version="1.0.0", lifespan=lifespan)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, SERVICE_NAME)

register_exception_handlers(app)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(product_public_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(payment_router)
app.include_router(order_router)


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"service": SERVICE_NAME, "status": "running"}
