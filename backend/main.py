"""
Markdown Viewer Diff Backend - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import config, diff
from services.config_manager import ConfigManager
from services.diff_engine import DEFAULT_WARN_TABLE_CELLS
from services.logging_config import get_logger, setup_logging
from services.session_manager import SessionManager

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    # Startup: settings, logging, then the session owner
    settings = ConfigManager.get_instance().get_config()
    setup_logging(settings.get("logging", {}).get("level", "INFO"))
    logger.info("Starting Markdown Viewer Diff Backend...")

    app.state.sessions = SessionManager(
        max_sessions=settings.get("sessions", {}).get("maxSessions", 32),
        warn_table_cells=settings.get("diff", {}).get("warnTableCells", DEFAULT_WARN_TABLE_CELLS),
    )
    logger.info(f"SessionManager initialized (max {app.state.sessions.max_sessions} sessions)")

    yield
    # Shutdown: end open event streams
    logger.info("Shutting down Markdown Viewer Diff Backend...")
    app.state.sessions.close_all()


app = FastAPI(
    title="Markdown Viewer Diff Backend",
    description="Line-level change tracking for a live markdown viewer",
    version="1.0.0",
    lifespan=lifespan,
)

# The viewer front-end runs locally
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(diff.router, prefix="/api/diff", tags=["diff"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mdview-diff-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=server.get("port", 8765))
