import logging
import os
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from airline_ops.api.router import api_router
from airline_ops.core.config import settings
from airline_ops.core.errors import (
    AccessDenied,
    Conflict,
    InvalidRole,
    InvalidState,
    NotFound,
    TransactionAborted,
)
from airline_ops.core.logging_config import configure_logging
from airline_ops.db.init_db import create_tables, seed_demo_data

configure_logging()
logger = logging.getLogger("airline_ops.startup")


def _run_migrations_if_needed():
    """Apply Alembic migrations automatically in production if enabled.

    Controlled by env var AUTO_APPLY_MIGRATIONS (default: '1'). Safe to run repeatedly.
    """
    if settings.env.lower() != "prod":
        return
    if os.getenv("AUTO_APPLY_MIGRATIONS", "1") != "1":
        return
    from alembic import command
    from alembic.config import Config
    alembic_ini = Path(__file__).resolve().parents[1] / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return
    cfg = Config(str(alembic_ini))
    # Ensure script_location resolves correctly when launched from arbitrary CWD
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    logger.info("Applying Alembic migrations -> head ...")
    command.upgrade(cfg, "head")
    logger.info("Migrations applied successfully")


app = FastAPI(title=settings.app_name, version="0.1.0")

# Configurable CORS origins (CORS_ORIGINS env). If empty -> dev defaults.
origins = settings.cors_origins
logger.info("Resolved CORS origins: %s", origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


def _error(code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=code, content={"detail": str(exc)})

@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return _error(status.HTTP_404_NOT_FOUND, exc)

@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    return _error(status.HTTP_403_FORBIDDEN, exc)

@app.exception_handler(InvalidRole)
async def invalid_role_handler(request: Request, exc: InvalidRole):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)

@app.exception_handler(Conflict)
async def conflict_handler(request: Request, exc: Conflict):
    # Transient: the client should retry the whole request
    return _error(status.HTTP_409_CONFLICT, exc)

@app.exception_handler(InvalidState)
async def invalid_state_handler(request: Request, exc: InvalidState):
    logger.error("Invariant violation on %s %s: %s", request.method, request.url.path, exc)
    return _error(status.HTTP_409_CONFLICT, exc)

@app.exception_handler(TransactionAborted)
async def aborted_handler(request: Request, exc: TransactionAborted):
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


@app.on_event("startup")
def startup():
    _run_migrations_if_needed()
    if settings.env.lower() in {"dev", "development"}:
        create_tables()
        seed_demo_data()
