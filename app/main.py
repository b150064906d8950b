# app/main.py
import asyncio
from contextlib import asynccontextmanager, suppress
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings
from app.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401


# Routers
from app.routers.cart import cart_store, router as cart_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")

# How often expired cart sessions are swept
CART_PURGE_INTERVAL_SECONDS = 60


async def _purge_cart_sessions() -> None:
    while True:
        await asyncio.sleep(CART_PURGE_INTERVAL_SECONDS)
        dropped = cart_store.purge_expired()
        if dropped:
            logger.info("Dropped %d expired cart session(s)", dropped)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Start sweeping expired cart sessions.

    Shutdown:
      - Stop the sweeper.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise

    purger = asyncio.create_task(_purge_cart_sessions())
    yield
    purger.cancel()
    with suppress(asyncio.CancelledError):
        await purger


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

# Versioned API prefix, e.g. /api/v1
app.include_router(cart_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "cart-checkout"}
