# deltacare/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from deltacare.core.config import get_settings

# Routers
from deltacare.routers.admin import router as admin_router
from deltacare.routers.auth import router as auth_router
from deltacare.routers.bookings import router as bookings_router
from deltacare.routers.cart import router as cart_router
from deltacare.routers.catalog import router as catalog_router
from deltacare.routers.dashboard import router as dashboard_router
from deltacare.routers.orders import router as orders_router
from deltacare.routers.wholesale import router as wholesale_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Log which Supabase project is used and whether admin features
        (session revocation) are available.

    Shutdown:
      - Nothing to release; clients are created per request or cached.
    """
    logger.info("🔄 Startup: using Supabase project %s", settings.SUPABASE_URL)
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.warning("⚠️ Startup: no SUPABASE_SERVICE_ROLE_KEY, sign-out will not revoke sessions")
    yield
    logger.info("Shutdown: bye")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Unknown routes answer {"detail": "Page not found"}; every other
    HTTP error keeps its own detail.
    """
    if exc.status_code == 404 and exc.detail == "Not Found":
        logger.info("404: no route for %s %s", request.method, request.url.path)
        return JSONResponse(status_code=404, content={"detail": "Page not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(catalog_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(bookings_router, prefix=settings.API_V1_STR)
app.include_router(dashboard_router, prefix=settings.API_V1_STR)
app.include_router(wholesale_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "deltacare-backend"}
