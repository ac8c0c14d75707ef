import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from alembic.config import Config
from alembic import command

from kanban_board.db import init_db
from kanban_board.db.database import ensure_sqlite_directory
from kanban_board.core import get_settings
from kanban_board.core.errors import BoardError
from kanban_board.api.v1 import api_router
from kanban_board.core.middleware import RequestLoggingMiddleware
from kanban_board.logs.server_log import api_logger

settings = get_settings()

ALEMBIC_INI = Path(__file__).parent.parent / "alembic.ini"


def run_migrations() -> None:
    alembic_cfg = Config(str(ALEMBIC_INI))
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    ensure_sqlite_directory(settings.DATABASE_URL)
    try:
        if settings.RUN_MIGRATIONS and ALEMBIC_INI.exists():
            # alembic's async env.py starts its own event loop
            await asyncio.to_thread(run_migrations)
            api_logger.info("Database migrations applied")

        await init_db()
        api_logger.info("Database initialized")
    except Exception as e:
        api_logger.error(f"Error initializing database: {e}")
        raise

    if not settings.KANBAN_API_KEY:
        api_logger.warning("KANBAN_API_KEY is not set: every /api request will be rejected")

    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Kanban board API with path-based project lookup",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(BoardError)
async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
    """Domain errors become {"detail": ...} with the error's status code"""
    api_logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(api_router)


@app.get("/health")
async def health():
    """Health check endpoint, no API key required"""
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    api_logger.info(f"Server starting on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "kanban_board.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )


if __name__ == "__main__":
    run()
