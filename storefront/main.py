# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from storefront.core.config import get_settings
from storefront.core.supabase_client import close_public_client

from storefront.routers.account import router as account_router
from storefront.routers.cart import router as cart_router
from storefront.routers.saved import router as saved_router
from storefront.routers.wishlist import router as wishlist_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Nothing to open: clients are created per request with the
        caller's token.

    Shutdown:
      - Drop realtime channels of the shared client, if one was opened.
    """
    logger.info("Startup: Supabase project %s", settings.SUPABASE_URL)
    yield
    await close_public_client()
    logger.info("Shutdown: realtime channels closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(wishlist_router, prefix=settings.API_V1_STR)
app.include_router(saved_router, prefix=settings.API_V1_STR)
app.include_router(account_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront-state"}
