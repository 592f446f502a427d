import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

import models  # noqa: F401  (registers tables on Base.metadata)
from core.config import settings
from core.db import Base, db_session, engine
from core.errors import register_exception_handlers
from routes.auth import router as auth_router
from routes.orders import router as orders_router
from routes.products import router as products_router
from services.users import ensure_admin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("lwg_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure tables exist (no migration tooling)
    Base.metadata.create_all(bind=engine)
    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        with db_session() as db:
            ensure_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if "*" in origins else origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(orders_router, prefix="/api")


def _health() -> dict:
    return {
        "ok": True,
        "time": datetime.now(timezone.utc).isoformat(),
        "service": settings.APP_NAME,
    }


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    return "OK"


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return _health()


@app.get("/api/health")
async def api_health_check():
    return _health()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
