"""FastAPI 入口：应用工厂、启动时建表与迁移、统一错误响应。"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ibdp_coach.api.v2 import router as api_v2_router
from ibdp_coach.config import get_settings
from ibdp_coach.db import Base, engine, ensure_sqlite_directory
from ibdp_coach.errors import ApiError
from ibdp_coach.migrations import run_migrations
import ibdp_coach.models  # noqa: F401  注册全部表

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时确保表存在并执行 SQL 迁移。"""
    settings = get_settings()
    logger.info("Starting IBDP Writing Coach API...")
    ensure_sqlite_directory(settings.database_url)
    Base.metadata.create_all(bind=engine)
    applied = run_migrations(engine)
    if applied:
        logger.info("Migrations applied: %s", ", ".join(applied))
    yield
    logger.info("Shutting down IBDP Writing Coach API...")


def create_app() -> FastAPI:
    """应用工厂，便于测试与拓展路由。"""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="IBDP Writing Coach API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Database error"})

    app.include_router(api_v2_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
