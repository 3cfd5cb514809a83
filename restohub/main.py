"""FastAPI entrypoint for the restaurant management backend."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from restohub.api.v1.api import api_router
from restohub.core.config import settings
from restohub.db.base import Base
from restohub.db.seed import ensure_default_manager
from restohub.db.session import SessionLocal, engine
from restohub.services.deferred_jobs import DeferredJobSweeper

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api/v1")
app.mount(settings.media_url, StaticFiles(directory=settings.media_root, check_dir=False), name="media")

sweeper: DeferredJobSweeper | None = None


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    content: dict[str, str] = {"detail": "Internal server error"}
    if not settings.is_production:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.on_event("startup")
def startup() -> None:
    global sweeper
    Base.metadata.create_all(bind=engine)
    Path(settings.media_root).mkdir(parents=True, exist_ok=True)
    with SessionLocal() as session:
        try:
            ensure_default_manager(session)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("[BOOTSTRAP] Manager bootstrap failed; continuing startup.")

    sweeper = DeferredJobSweeper(SessionLocal, settings.job_sweep_interval_seconds)
    executed = sweeper.sweep_once()
    logger.info("[BOOTSTRAP] Startup sweep executed %s deferred job(s)", executed)
    if settings.job_sweep_enabled:
        sweeper.start()


@app.on_event("shutdown")
def shutdown() -> None:
    if sweeper is not None:
        sweeper.stop()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
