"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from match_fit.config import settings
from match_fit.api.routes.lineups import router as lineups_router
from match_fit.errors import (
    ConflictError,
    LineupError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from match_fit.repositories.lineup_repository import LineupRepository
from match_fit.repositories.team_repository import TeamRepository
from match_fit.services.lineup_service import LineupService

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Database path - use settings or default to data/match_fit.duckdb in repo root
def get_database_path() -> Path:
    """Get the database path from settings or default location."""
    if settings.database_path:
        db_path = Path(settings.database_path)
        if db_path.is_absolute():
            return db_path
        # Relative path - resolve from repo root
        repo_root = Path(__file__).parent.parent.parent.parent
        return repo_root / settings.database_path
    return Path(__file__).parent.parent.parent.parent / "data" / "match_fit.duckdb"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    db_path = get_database_path()
    if not hasattr(app.state, "lineup_service"):
        # LineupRepository creates the database and schema when missing
        lineup_repository = LineupRepository(db_path)
        team_repository = TeamRepository(db_path)
        app.state.lineup_service = LineupService(
            lineup_repository,
            team_repository,
            enable_notifications=settings.enable_notifications,
        )
    yield


app = FastAPI(
    title="Match Fit",
    description="Team lineup builder - formations, starters, bench and publishing",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Lineup errors map onto HTTP status codes by family
ERROR_STATUS_CODES: list[tuple[type[LineupError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (PersistenceError, 500),
]


def status_code_for(error: LineupError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


@app.exception_handler(LineupError)
async def lineup_error_handler(request: Request, exc: LineupError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.code},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "match-fit"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Match Fit API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(lineups_router)


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("match_fit.main:app", host=settings.host, port=settings.port, reload=settings.debug)
